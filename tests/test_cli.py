from runtime.cli import main

def write_map(tmp_path, text):
    path = tmp_path / "map.txt"
    path.write_text(text, encoding="utf-8")
    return str(path)

def test_prints_outcome(tmp_path, capsys):
    path = write_map(tmp_path, "#######\n#.G...#\n#...EG#\n#.#.#G#\n#..G#E#\n#.....#\n#######\n")

    assert main([path]) == 0
    out = capsys.readouterr().out
    assert "Outcome: 47 * 590 = 27730" in out
    assert "#.#.#G#   G(59)" in out

def test_verbose_prints_each_round(tmp_path, capsys):
    path = write_map(tmp_path, "####\n#EG#\n####\n")

    assert main([path, "--verbose", "--elf-attack", "100"]) == 0
    out = capsys.readouterr().out
    assert "Round 1:" in out and "Round 2:" in out
    assert "Outcome: 2 * 197 = 394" in out

def test_bad_map_exits_with_error(tmp_path, capsys):
    path = write_map(tmp_path, "####\n#E?#\n####\n")

    assert main([path]) == 2
    assert "Unknown map character" in capsys.readouterr().err

def test_missing_file(tmp_path):
    assert main([str(tmp_path / "nope.txt")]) == 2

def test_stalemate_exit_code(tmp_path, capsys):
    path = write_map(tmp_path, "#####\n#E#G#\n#####\n")

    assert main([path, "--goblin-attack", "5"]) == 1
    assert "changed nothing" in capsys.readouterr().err

def test_find_elf_attack(tmp_path, capsys):
    path = write_map(tmp_path, "####\n#GE#\n####\n")

    assert main([path, "--find-elf-attack"]) == 0
    out = capsys.readouterr().out
    assert "Elf attack 4" in out
    assert "Outcome: 50 * 50 = 2500" in out

def test_find_elf_attack_from_given_start(tmp_path, capsys):
    path = write_map(tmp_path, "####\n#GE#\n####\n")

    assert main([path, "--find-elf-attack", "--elf-attack", "10"]) == 0
    assert "Elf attack 10" in capsys.readouterr().out

def test_find_elf_attack_stalemate(tmp_path, capsys):
    path = write_map(tmp_path, "#####\n#E#G#\n#####\n")

    assert main([path, "--find-elf-attack"]) == 1
    assert "changed nothing" in capsys.readouterr().err
