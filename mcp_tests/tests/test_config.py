import config


def test_env_bool(monkeypatch):
    monkeypatch.setenv("X_FLAG", " Yes ")
    assert config._env_bool("X_FLAG", False) is True

    monkeypatch.setenv("X_FLAG", "off")
    assert config._env_bool("X_FLAG", True) is False

    monkeypatch.delenv("X_FLAG")
    assert config._env_bool("X_FLAG", True) is True


def test_env_int_falls_back_on_garbage(monkeypatch):
    monkeypatch.setenv("X_INT", "12")
    assert config._env_int("X_INT", 1) == 12

    monkeypatch.setenv("X_INT", "twelve")
    assert config._env_int("X_INT", 1) == 1


def test_env_float(monkeypatch):
    monkeypatch.setenv("X_FLOAT", "0.5")
    assert config._env_float("X_FLOAT", 2.0) == 0.5

    monkeypatch.setenv("X_FLOAT", "")
    assert config._env_float("X_FLOAT", 2.0) == 2.0


def test_defaults_are_sane():
    assert config.MAX_READ_BYTES > 0
    assert config.READ_CHUNK_SIZE > 0
    assert config.POLL_INTERVAL > 0
