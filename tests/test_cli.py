import sys

import pytest

from noiseflow import cli, list_examples, run_example


@pytest.fixture(autouse=True)
def _restore_argv(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["noiseflow"])


def test_list(capsys):
    cli.main(["--list"])
    out = capsys.readouterr().out
    assert "Available examples:" in out
    for name in list_examples():
        assert f"  - {name}" in out


def test_unknown_example_exits(capsys):
    with pytest.raises(SystemExit) as exc:
        cli.main(["no_such_example"])
    assert exc.value.code == 1
    assert "Unknown example" in capsys.readouterr().out


def test_forwarded_args():
    args = cli.build_parser().parse_args(
        ["--interactive", "--fps", "12", "--preset", "calm", "flow_lines", "--", "--steps", "3"]
    )
    forwarded = cli.forwarded_args(args)
    assert forwarded[0] == "--interactive"
    assert forwarded[1:5] == ["--fps", "12.0", "--preset", "calm"]
    assert forwarded[-2:] == ["--steps", "3"]


def test_no_interactive_wins():
    args = cli.build_parser().parse_args(["--interactive", "--no-interactive", "noise_slice"])
    assert "--interactive" not in cli.forwarded_args(args)


def test_run_example_rejects_unknown():
    with pytest.raises(ValueError):
        run_example("missing")


def test_noise_slice_example(tmp_path, capsys):
    out = tmp_path / "slice.ppm"
    run_example("noise_slice", ["--size", "16", "--octaves", "3", "--output", str(out)])
    assert out.read_bytes().startswith(b"P6\n16 16\n255\n")
    assert "Saved" in capsys.readouterr().out


def test_flow_lines_example(tmp_path):
    out = tmp_path / "flow.ppm"
    run_example("flow_lines", [
        "--preset", "calm", "--seed", "3", "--particles", "50", "--steps", "5",
        "--width", "32", "--height", "16", "--output", str(out),
    ])
    assert out.read_bytes().startswith(b"P6\n32 16\n255\n")


def test_flow_lines_writes_frame_sequence(tmp_path):
    frames = tmp_path / "frames"
    run_example("flow_lines", [
        "--preset", "calm", "--seed", "-5", "--particles", "20", "--steps", "6",
        "--snapshot-every", "2", "--width", "16", "--height", "8",
        "--output", str(tmp_path / "flow.ppm"), "--frames-dir", str(frames),
    ])
    assert sorted(p.name for p in frames.iterdir()) == ["flow_000.ppm", "flow_001.ppm", "flow_002.ppm"]


def test_direction_field_example(tmp_path):
    out = tmp_path / "dirs.ppm"
    run_example("direction_field", ["--preset", "calm", "--cell-px", "2", "--output", str(out)])
    # calm preset grid is 64x36 cells
    assert out.read_bytes().startswith(b"P6\n128 72\n255\n")
