import os

import pandas as pd
import pytest

from config import build_scene, parse_args
from main import export_sampled_rays, main
from simulation.scene import SceneConfigError


def test_default_arguments():
    args = parse_args([])
    assert (args.width, args.height) == (80, 52)
    assert args.inclination == 10.0
    assert args.fov == 60.0
    assert args.observer_distance == 39.0
    assert args.frames == 180
    assert args.dump is None
    scene = build_scene(args)
    assert scene.width == 80 and scene.r_obs == 39.0
    assert scene.disk_tilt_deg == 0.0 and scene.roll_deg == 0.0


def test_build_scene_rejects_bad_inclination():
    with pytest.raises(SceneConfigError):
        build_scene(parse_args(['--inclination', '95']))


def test_main_reports_invalid_configuration():
    assert main(['--width', '0', '--dump', 'never-written.txt']) == 2
    assert not os.path.exists('never-written.txt')


def test_main_rejects_empty_dump(tmp_path):
    out = tmp_path / 'empty.txt'
    assert main(['--width', '8', '--height', '5', '--dump', str(out), '--frames', '0', '--no-progress']) == 2
    assert not out.exists()


def test_main_dumps_frames(tmp_path, capsys):
    out = tmp_path / 'frames' / 'disk.txt'
    code = main(['--width', '16', '--height', '10', '--dump', str(out), '--frames', '3', '--no-progress'])
    assert code == 0
    assert 'Photon summary' in capsys.readouterr().out
    text = out.read_text(encoding='ascii')
    frames = text.split('\f')
    assert len(frames) == 3
    for frame in frames:
        lines = frame.split('\n')
        # every row ends with a newline, so the last split element is empty
        assert lines[-1] == ''
        assert len(lines[:-1]) == 10
        assert all(len(line) == 16 for line in lines[:-1])


def test_main_writes_photon_data_and_plots(tmp_path):
    csv = tmp_path / 'hits.csv'
    plots = tmp_path / 'plots'
    code = main(['--width', '12', '--height', '8', '--dump', str(tmp_path / 'f.txt'), '--frames', '1',
                 '--photon-data', str(csv), '--sample-rays', '2', '--plots', str(plots), '--seed', '7',
                 '--no-progress'])
    assert code == 0
    df = pd.read_csv(csv)
    assert len(df) == 12 * 8
    assert list(df.columns) == ['x', 'y', 'kind', 'r', 'phi', 'g', 'emiss']
    for name in ['lens_map.png', 'brightness.png', 'ray_trajectories.png', 'sampled_rays.csv']:
        assert (plots / name).exists()


def test_export_sampled_rays_is_seeded(tmp_path):
    scene = build_scene(parse_args(['--width', '10', '--height', '6']))
    a = export_sampled_rays(scene, 3, tmp_path / 'a.csv', seed=3)
    b = export_sampled_rays(scene, 3, tmp_path / 'b.csv', seed=3)
    assert len(a) == 3
    assert pd.read_csv(tmp_path / 'a.csv').equals(pd.read_csv(tmp_path / 'b.csv'))
    assert set(pd.read_csv(tmp_path / 'a.csv')['ray_id']) == {0, 1, 2}
