from motologo.cli import build_parser, main
from motologo.images import load_image_file, save_image_file
from motologo.runlength import PixelGrid


def test_parser_arguments():
    args = build_parser().parse_args(['decode', 'out', 'logo.bin', '--strict'])
    assert (args.command, args.images_out, args.file_in, args.strict) == ('decode', 'out', 'logo.bin', True)
    args = build_parser().parse_args(['-v', 'encode', 'in', 'logo.bin'])
    assert (args.command, args.images_in, args.file_out, args.verbose) == ('encode', 'in', 'logo.bin', True)


def test_encode_list_decode(tmp_path, sample_grid, capsys):
    images = tmp_path / 'images'
    images.mkdir()
    save_image_file(images / 'boot.png', sample_grid)
    save_image_file(images / 'low_battery.png', PixelGrid.blank(30, 2, (255, 0, 0)))
    logo = tmp_path / 'logo.bin'

    assert main(['encode', str(images), str(logo)]) == 0
    assert logo.stat().st_size % 0x100 == 0

    assert main(['list', str(logo)]) == 0
    out = capsys.readouterr().out
    assert 'boot' in out
    assert '30x2' in out
    assert '2 entries' in out

    assert main(['-q', 'decode', str(tmp_path / 'out'), str(logo)]) == 0
    assert load_image_file(tmp_path / 'out' / 'boot.png') == sample_grid
    assert load_image_file(tmp_path / 'out' / 'low_battery.png') == PixelGrid.blank(30, 2, (255, 0, 0))


def test_bad_archive_exits_with_error(tmp_path):
    logo = tmp_path / 'logo.bin'
    logo.write_bytes(b'not a logo archive')
    assert main(['decode', str(tmp_path / 'out'), str(logo)]) == 1
    assert main(['list', str(logo)]) == 1
    assert main(['list', str(tmp_path / 'missing.bin')]) == 1
