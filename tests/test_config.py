from localstorage.config import Settings

SAMPLE = "[server]\nUSBAutoMount = False\n\n[app]\nLogSaveName = custom\n"


def test_init_setup_creates_file_from_sample(tmp_path):
    path = tmp_path / "local-storage.conf"
    settings = Settings()
    settings.init_setup(str(path), SAMPLE)
    assert path.read_text() == SAMPLE
    assert settings.config_file_path == str(path)


def test_init_setup_maps_values_and_keeps_defaults(tmp_path):
    path = tmp_path / "local-storage.conf"
    settings = Settings()
    settings.init_setup(str(path), SAMPLE)
    assert settings.server.usb_auto_mount == "False"
    assert settings.app.log_save_name == "custom"
    assert settings.server.enable_merger_fs == "False"
    assert settings.app.shell_path == "/usr/share/dappsteros/shell"


def test_existing_file_is_not_overwritten(tmp_path):
    path = tmp_path / "local-storage.conf"
    path.write_text("[server]\nEnableMergerFS = true\n")
    settings = Settings()
    settings.init_setup(str(path), SAMPLE)
    assert settings.server.enable_merger_fs == "true"
    assert settings.server.usb_auto_mount == "True"
    assert "EnableMergerFS" in path.read_text()


def test_save_setup_round_trip(tmp_path):
    path = tmp_path / "local-storage.conf"
    settings = Settings()
    settings.init_setup(str(path), SAMPLE)
    settings.server.enable_merger_fs = "true"
    settings.common.runtime_path = str(tmp_path / "run")
    settings.save_setup(str(path))

    reloaded = Settings()
    reloaded.init_setup(str(path), "")
    assert reloaded.server.enable_merger_fs == "true"
    assert reloaded.common.runtime_path == str(tmp_path / "run")
    assert reloaded.app.log_save_name == "custom"
    assert reloaded.server == settings.server
    assert reloaded.app == settings.app