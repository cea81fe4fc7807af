import numpy as np
import pytest
from PIL import Image

import batch_generate
import markov_image
from conftest import BLUE, GREEN, RED, YELLOW
from image_io import load_image
from transition_model import Bounds


def test_build_model(four_color_grid):
    model = markov_image.build_model(four_color_grid, Bounds(0, 0, 2, 2), threshold=2)
    assert model.threshold == 2
    assert model.num_transitions == 8


def test_generate_writes_same_size_image(write_png, striped_grid, tmp_path):
    source = write_png(striped_grid)
    results = markov_image.generate(source, tmp_path / 'out.png')

    assert len(results) == 1
    assert results[0].coverage == 1.0
    assert results[0].unreached_regions == 0
    decoded = load_image(results[0].path)
    assert decoded.bounds == Bounds(0, 0, 12, 8)
    assert {tuple(int(c) for c in px) for px in decoded.grid.reshape(-1, 4)} <= {RED, BLUE}


def test_generate_many_from_one_model(write_png, four_color_grid, tmp_path):
    results = markov_image.generate(write_png(four_color_grid), tmp_path / 'out.png', count=3)
    names = [r.path.name for r in results]
    assert names == ['out-1.png', 'out-2.png', 'out-3.png']
    for result in results:
        grid = load_image(result.path).grid
        assert {tuple(int(c) for c in px) for px in grid.reshape(-1, 4)} <= {RED, GREEN, BLUE, YELLOW}


def test_generate_rejects_bad_count(write_png, four_color_grid, tmp_path):
    with pytest.raises(ValueError):
        markov_image.generate(write_png(four_color_grid), tmp_path / 'out.png', count=0)


def test_cli_success(write_png, four_color_grid, tmp_path, capsys):
    out = tmp_path / 'cli.png'
    code = markov_image.main([str(write_png(four_color_grid)), str(out)])
    assert code == 0
    assert out.exists()
    assert 'States: 4' in capsys.readouterr().out


def test_cli_quiet(write_png, four_color_grid, tmp_path, capsys):
    code = markov_image.main([str(write_png(four_color_grid)), str(tmp_path / 'q.png'), '-q'])
    assert code == 0
    assert capsys.readouterr().out == ''


def test_cli_missing_input(tmp_path, capsys):
    code = markov_image.main([str(tmp_path / 'missing.png'), str(tmp_path / 'out.png')])
    assert code == markov_image.EXIT_FATAL
    assert 'failed to read input file' in capsys.readouterr().err


def test_cli_zero_threshold(write_png, four_color_grid, tmp_path, capsys):
    code = markov_image.main([str(write_png(four_color_grid)), str(tmp_path / 'o.png'), '-t', '0'])
    assert code == markov_image.EXIT_FATAL
    assert 'threshold' in capsys.readouterr().err


def test_batch(write_png, four_color_grid, striped_grid, tmp_path, capsys):
    write_png(four_color_grid, 'a.png')
    write_png(striped_grid, 'b.png')
    out_dir = tmp_path / 'generated'

    code = batch_generate.main(['-i', str(tmp_path), '-o', str(out_dir)])
    assert code == 0
    assert sorted(p.name for p in out_dir.iterdir()) == ['a-markov.png', 'b-markov.png']
    assert 'Completed: 2/2' in capsys.readouterr().out


def test_batch_reports_failures(tmp_path, capsys):
    (tmp_path / 'broken.png').write_bytes(b'nope')
    code = batch_generate.main(['-i', str(tmp_path), '-o', str(tmp_path / 'out')])
    assert code == 1
    assert 'broken.png' in capsys.readouterr().err


def test_batch_bad_input_dir(tmp_path):
    assert batch_generate.main(['-i', str(tmp_path / 'missing'), '-o', str(tmp_path)]) == 2


def test_batch_empty_dir(tmp_path):
    empty = tmp_path / 'empty'
    empty.mkdir()
    assert batch_generate.main(['-i', str(empty), '-o', str(tmp_path / 'out')]) == 2


def test_cli_truncated_input_is_a_read_error(tmp_path, capsys):
    rng = np.random.default_rng(1)
    path = tmp_path / 'cut.png'
    Image.fromarray(rng.integers(0, 256, size=(64, 64, 4), dtype=np.uint8)).save(path)
    data = path.read_bytes()
    path.write_bytes(data[:len(data) // 2])

    code = markov_image.main([str(path), str(tmp_path / 'out.png')])
    err = capsys.readouterr().err
    assert code == markov_image.EXIT_FATAL
    assert 'Could not decode image' in err
    assert 'failed to write output file' not in err
    assert not (tmp_path / 'out.png').exists()


def test_cli_usage_error_exits_two(capsys):
    with pytest.raises(SystemExit) as exc:
        markov_image.main([])
    assert exc.value.code == 2
