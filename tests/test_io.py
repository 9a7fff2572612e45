import json

import numpy as np
import pytest

from glowdock.data.io import (
    format_checkpoint_line,
    load_config,
    load_nmodes,
    load_pdb_atoms,
    load_starting_positions,
    parse_swarm_id,
)

PDB_LINES = [
    "HEADER    TEST PDB",
    "ATOM      1  N   ALA A   1      11.104  13.207  10.456  1.00 20.00           N",
    "ATOM      2  CA  ALA A   1      12.560  13.500  10.300  1.00 20.00           C",
    "ATOM      3  H   ALA A   1      12.000  14.000  10.000  1.00 20.00           H",
    "ATOM      4  OXT ALA A   1      13.000  13.000  11.000  1.00 20.00           O",
    "HETATM    5  O   HOH A   2      14.000  12.000   9.000  1.00 20.00           O",
    "TER",
    "END",
]


def _write_pdb(tmp_path, lines=PDB_LINES):
    path = tmp_path / "sample.pdb"
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return str(path)


def test_load_pdb_atoms_reads_atom_and_hetatm(tmp_path):
    atoms = load_pdb_atoms(_write_pdb(tmp_path))

    assert [atom.name for atom in atoms] == ["N", "CA", "H", "OXT", "O"]
    assert atoms[4].record == "HETATM"
    assert atoms[1].residue_id == "A.ALA.1"
    assert np.allclose(atoms[1].coords, [12.56, 13.5, 10.3])


def test_load_pdb_atoms_filters(tmp_path):
    path = _write_pdb(tmp_path)

    assert [a.name for a in load_pdb_atoms(path, noh=True)] == ["N", "CA", "OXT", "O"]
    assert [a.name for a in load_pdb_atoms(path, noxt=True)] == ["N", "CA", "H", "O"]
    assert [a.name for a in load_pdb_atoms(path, now=True)] == ["N", "CA", "H", "OXT"]


def test_load_pdb_atoms_malformed_record(tmp_path):
    path = _write_pdb(tmp_path, ["ATOM      1  N   ALA A   1      11.104  xx.207  10.456"])
    with pytest.raises(ValueError, match=":1"):
        load_pdb_atoms(path)


def test_load_starting_positions(tmp_path):
    path = tmp_path / "initial_positions_0.dat"
    path.write_text("1 2 3 1 0 0 0\n\n-1.5 0 0 0 1 0 0\n", encoding="utf-8")

    positions = load_starting_positions(str(path))

    assert len(positions) == 2
    assert np.allclose(positions[1], [-1.5, 0, 0, 0, 1, 0, 0])


def test_load_starting_positions_errors(tmp_path):
    short = tmp_path / "short.dat"
    short.write_text("1 2 3 1 0 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="at least 7"):
        load_starting_positions(str(short))

    bad = tmp_path / "bad.dat"
    bad.write_text("1 2 3 one 0 0 0\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Unparseable"):
        load_starting_positions(str(bad))

    modes = tmp_path / "modes.dat"
    modes.write_text("1 2 3 1 0 0 0 0.5\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Expected 9 columns"):
        load_starting_positions(str(modes), expected_columns=9)

    with pytest.raises(FileNotFoundError):
        load_starting_positions(str(tmp_path / "missing.dat"))


def test_parse_swarm_id():
    assert parse_swarm_id("/sim/init/initial_positions_12.dat") == 12
    with pytest.raises(ValueError):
        parse_swarm_id("positions_12.dat")


def test_load_nmodes_flattens_and_validates(tmp_path):
    path = tmp_path / "rec_nm.npy"
    np.save(path, np.arange(12, dtype=float).reshape(2, 2, 3))

    nmodes = load_nmodes(str(path), num_atoms=2, num_anm=2)

    assert nmodes.shape == (12,)
    assert nmodes[5] == 5.0
    with pytest.raises(ValueError, match="does not correspond"):
        load_nmodes(str(path), num_atoms=3, num_anm=2)
    with pytest.raises(FileNotFoundError):
        load_nmodes(str(tmp_path / "lig_nm.npy"), num_atoms=2, num_anm=2)


def test_load_config_json_and_yaml(tmp_path):
    json_path = tmp_path / "setup.json"
    json_path.write_text(json.dumps({"receptor_pdb": "rec.pdb", "use_anm": False}), encoding="utf-8")
    yaml_path = tmp_path / "setup.yaml"
    yaml_path.write_text("receptor_pdb: rec.pdb\nanm_rec: 10\n", encoding="utf-8")

    assert load_config(str(json_path)) == {"receptor_pdb": "rec.pdb", "use_anm": False}
    assert load_config(str(yaml_path))["anm_rec"] == 10


def test_load_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "setup.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError, match="mapping"):
        load_config(str(path))


def test_format_checkpoint_line_rounding():
    line = format_checkpoint_line([0.123456789, 0, 0], [1, 0, 0, 0], [], [], 2.5, 3, 0.4567, -1.0)
    assert line == (
        "(0.1234568, 0.0000000, 0.0000000, 1.0000000, 0.0000000, 0.0000000, 0.0000000)"
        "    0    0   2.50000000  3 0.457 -1.00000000"
    )


def test_load_config_rejects_malformed_file(tmp_path):
    path = tmp_path / "setup.json"
    path.write_text('{"receptor_pdb": "r.pdb", ', encoding="utf-8")
    with pytest.raises(ValueError, match="Malformed setup file"):
        load_config(str(path))
