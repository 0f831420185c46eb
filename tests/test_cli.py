import json

import pytest

import moldkit.__main__ as cli
from moldkit.mirror import create_mirror
from moldkit.paper import PageSettingsError
from moldkit.serialization import Design, dump_design, load_design
from moldkit.shapes import rectangle_figure


def _write_design(tmp_path):
    front, back = create_mirror(rectangle_figure('front', 100.0, 50.0, x=20.0), 'back', (0.0, 0.0), (0.0, 1.0))
    path = tmp_path / 'design.json'
    dump_design(Design(figures=[front, back]), path)
    return path


def test_measure_prints_json(tmp_path, capsys):
    path = _write_design(tmp_path)

    cli.main(['--log-level', 'WARNING', 'measure', str(path)])

    payload = json.loads(capsys.readouterr().out)
    assert [row['id'] for row in payload['figures']] == ['front', 'back']
    assert payload['figures'][0]['measures']['figureLengthPx'] == pytest.approx(300.0)
    assert payload['figures'][0]['totalLengthCm'] == pytest.approx(300.0 / 37.7952755906)


def test_commit_writes_output_file(tmp_path):
    path = _write_design(tmp_path)
    out_path = tmp_path / 'out' / 'committed.json'

    cli.main(['commit', str(path), '--output', str(out_path)])

    committed = json.loads(out_path.read_text(encoding='utf-8'))
    assert all('measures' in fig for fig in committed['figures'])
    assert len(load_design(out_path).figures) == 2


def test_plan_uses_command_line_paper(tmp_path, capsys):
    path = _write_design(tmp_path)

    cli.main(['plan', str(path), '--paper', 'A4', '--orientation', 'landscape', '--margin-cm', '1'])

    payload = json.loads(capsys.readouterr().out)
    assert payload['orientation'] == 'landscape'
    assert payload['pageCount'] == 1
    assert payload['tiles'][0]['label'] == 'R1C1'
    assert payload['tiles'][0]['figures'] == ['front', 'back']


def test_invalid_design_exits(tmp_path):
    path = tmp_path / 'bad.json'
    path.write_text(json.dumps({'version': 2, 'figures': [{'id': 'x', 'kind': 'seam', 'tool': 'rectangle'}]}))

    with pytest.raises(SystemExit) as exc:
        cli.main(['measure', str(path)])

    assert exc.value.code == 1


@pytest.mark.parametrize(
    'text',
    [
        '{not json',
        json.dumps({'version': 2, 'figures': [], 'pageGuideSettings': {'paperSize': 'B5'}}),
    ],
)
def test_unreadable_design_exits(tmp_path, caplog, text):
    path = tmp_path / 'bad.json'
    path.write_text(text, encoding='utf-8')

    with pytest.raises(SystemExit) as exc:
        cli.main(['measure', str(path)])

    assert exc.value.code == 1
    assert 'Invalid design' in caplog.text


def test_page_settings_error_exits(tmp_path, monkeypatch):
    path = _write_design(tmp_path)

    def _fail(figures, settings):
        raise PageSettingsError('no printable area')

    monkeypatch.setattr(cli, 'plan_tile_grid', _fail)

    with pytest.raises(SystemExit) as exc:
        cli.main(['plan', str(path)])

    assert exc.value.code == 1


def test_commit_delegates_to_pipeline(tmp_path, monkeypatch, capsys):
    path = _write_design(tmp_path)
    seen = []
    real_commit = cli.commit

    def _commit(figures, state=None):
        seen.append([fig.id for fig in figures])
        return real_commit(figures, state)

    monkeypatch.setattr(cli, 'commit', _commit)

    cli.main(['commit', str(path)])

    assert seen == [['front', 'back']]
    assert json.loads(capsys.readouterr().out)['version'] == 2
