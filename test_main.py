import h5py
import numpy as np
import pytest

import main


@pytest.fixture(autouse=True)
def quiet_setup(monkeypatch):
    monkeypatch.setattr(main.config_paths, "ensure_config_dirs", lambda: None)
    monkeypatch.setattr(main, "configure_logging", lambda level: None)


@pytest.fixture
def h5_path(tmp_path):
    path = tmp_path / "model.h5"
    with h5py.File(path, "w") as f:
        grp = f.create_group("energy")
        ds = grp.create_dataset("demand", data=np.zeros((3, 2)))
        ds.attrs["units"] = "GWh"
        ds.attrs["doc"] = ""
        ds.attrs["dims"] = np.array([b"region", b"year"])
        grp.create_dataset("region", data=np.array([b"north", b"south"]))
        grp.create_dataset("year", data=np.array([2020, 2021, 2022]))
    return path


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc:
        main.main(["--version"])
    assert exc.value.code == 0
    assert main.__version__ in capsys.readouterr().out


def test_missing_file_exits_with_error(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main.main([str(tmp_path / "absent.h5")])
    assert exc.value.code == 1
    assert "File not found" in capsys.readouterr().err


def test_unreadable_file_exits_with_error(tmp_path, capsys):
    path = tmp_path / "plain.h5"
    path.write_text("not hdf5")
    with pytest.raises(SystemExit) as exc:
        main.main([str(path)])
    assert exc.value.code == 1
    assert "Unable to open" in capsys.readouterr().err


def test_unknown_dataset_exits_with_error(h5_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main.main([str(h5_path), "--dataset", "energy/nope"])
    assert exc.value.code == 1
    assert "energy/nope" in capsys.readouterr().err


def test_runs_the_interface_with_the_requested_table(h5_path, monkeypatch):
    started = []
    monkeypatch.setattr(main.curses, "wrapper", lambda fn: started.append(fn))
    main.main([str(h5_path), "-d", "energy/demand"])
    assert len(started) == 1
