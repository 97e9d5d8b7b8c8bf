from pathlib import Path

from happy_moments import config


def test_load_environment_reads_variables(monkeypatch, tmp_path):
    monkeypatch.setenv('DATA_DIR', str(tmp_path / "data"))
    monkeypatch.setenv('OUTPUT_DIR', str(tmp_path / "figures"))
    monkeypatch.setenv('STEMMER', 'snowball')
    monkeypatch.delenv('HM_DATA_URL', raising=False)
    monkeypatch.delenv('DEMO_DATA_URL', raising=False)

    env = config.load_environment()

    assert env['data_dir'] == tmp_path / "data"
    assert env['output_dir'] == tmp_path / "figures"
    assert env['stemmer'] == 'snowball'
    assert env['hm_data_url'] == config.HM_DATA_URL
    assert env['demo_data_url'] == config.DEMO_DATA_URL


def test_create_directories(tmp_path):
    env = {'data_dir': tmp_path / "a" / "data", 'output_dir': tmp_path / "b"}
    config.create_directories(env)
    assert Path(env['data_dir']).is_dir()
    assert Path(env['output_dir']).is_dir()
