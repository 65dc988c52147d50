from apps.api import main as main_module


def test_run_serves_app_on_configured_address(monkeypatch):
    calls = []
    monkeypatch.setattr(main_module.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))
    monkeypatch.setenv("CATCARE_API_HOST", "0.0.0.0")
    monkeypatch.setenv("CATCARE_API_PORT", "9100")

    main_module.run()

    assert calls == [(main_module.app, {"host": "0.0.0.0", "port": 9100})]
