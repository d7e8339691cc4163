"""End-to-end tests for both run modes and the command line."""

import yaml
from click.testing import CliRunner

from asmdups import __version__
from asmdups.cli import build_cluster_report, build_pair_report, main
from asmdups.config import CorpusConfig, DupsConfig

from conftest import BASE_CLASSES, JR_RA, NOP, ops_from_classes, write_listing


def corpus_config(base, *names):
    return DupsConfig(
        base_dir=str(base),
        corpora=[CorpusConfig(name=n, asm_dir=f"asm/{n}", src_dir="src", include_root="asm") for n in names],
    )


def write_project(base):
    """A project with two overlays sharing one function and a C file including one of them."""
    write_listing(base / "asm" / "nz0" / "func_a.s", "func_a", ops_from_classes(BASE_CLASSES, low=0x1234))
    write_listing(base / "asm" / "np3" / "func_b.s", "func_b", ops_from_classes(BASE_CLASSES, low=0x42))
    write_listing(base / "asm" / "np3" / "unique.s", "unique", ops_from_classes([63, 62, 61, 60]))
    (base / "src").mkdir(parents=True, exist_ok=True)
    (base / "src" / "nz0.c").write_text('INCLUDE_ASM("nz0", func_a);\n')


class TestClusterMode:
    """Test the clustering pipeline."""

    def test_stubs_produce_no_clusters(self, tmp_path):
        write_listing(tmp_path / "asm" / "nz0" / "stub.s", "stub_a", [JR_RA, NOP])
        write_listing(tmp_path / "asm" / "np3" / "stub.s", "stub_b", [JR_RA, NOP])
        (tmp_path / "src").mkdir()

        report = build_cluster_report(corpus_config(tmp_path, "nz0", "np3"), 0.9)

        assert len(report) == 0

    def test_low_bit_difference_clusters(self, tmp_path):
        write_project(tmp_path)

        report = build_cluster_report(corpus_config(tmp_path, "nz0", "np3"), 0.94)

        assert len(report) == 1
        members = report.rows()[0]
        assert [f.name for f in members] == ["func_b", "func_a"]
        assert [f.similarity for f in members] == [1.0, 0.0]

    def test_decompiled_flags(self, tmp_path):
        write_project(tmp_path)

        report = build_cluster_report(corpus_config(tmp_path, "nz0", "np3"), 0.94)

        flags = {f.name: f.decompiled for f in report.rows()[0]}
        assert flags == {"func_a": False, "func_b": True}

    def test_fragments_find_shared_subroutine(self, tmp_path):
        shared = [i % 50 + 1 for i in range(32)]
        write_listing(tmp_path / "asm" / "nz0" / "left.s", "left", ops_from_classes([60] * 8 + shared))
        write_listing(tmp_path / "asm" / "np3" / "right.s", "right", ops_from_classes(shared + [61] * 20))
        (tmp_path / "src").mkdir()

        report = build_cluster_report(corpus_config(tmp_path, "nz0", "np3"), 1.0)

        names = sorted(f.name for members in report.rows() for f in members)
        assert names == ["left:8:39", "right:0:31"]


class TestPairMode:
    """Test the ordered comparison pipeline."""

    def test_low_bit_difference_matches(self, two_dirs):
        report = build_pair_report([str(d) for d in two_dirs], DupsConfig(), 0.94)

        matches = report.comparison.matches
        assert [(m.left.name, m.right.name, m.similarity) for m in matches] == [("func_a", "func_b", 1.0)]


class TestCommandLine:
    """Test the click entry point."""

    def test_pair_mode_to_file(self, two_dirs, tmp_path):
        dir_a, dir_b = two_dirs
        out = tmp_path / "pairs.txt"

        result = CliRunner().invoke(main, [
            "--threshold", "0.94", "--dir", str(dir_a), "--dir", str(dir_b), "--output-file", str(out),
        ])

        assert result.exit_code == 0, result.output
        text = out.read_text()
        assert "Functions in file order" in text
        assert "func_a".ljust(40) + " | func_b" in text

    def test_pair_mode_to_stdout(self, two_dirs):
        dir_a, dir_b = two_dirs

        result = CliRunner().invoke(main, ["-t", "0.94", "-d", str(dir_a), "-d", str(dir_b)])

        assert result.exit_code == 0, result.output
        assert "Functions in file order" in result.output

    def test_cluster_mode_with_config(self, tmp_path):
        write_project(tmp_path)
        config_path = tmp_path / "asmdups.yml"
        config_path.write_text(yaml.dump(corpus_config("unused", "nz0", "np3").to_dict()))
        out = tmp_path / "report.txt"

        result = CliRunner().invoke(main, [
            "--threshold", "0.94",
            "--config", str(config_path),
            "--src-base", str(tmp_path),
            "--output-file", str(out),
        ])

        assert result.exit_code == 0, result.output
        lines = out.read_text().splitlines()
        assert len(lines) == 4
        assert "asm/np3/func_b.s" in lines[2]
        assert "asm/nz0/func_a.s" in lines[3]

    def test_missing_directory_fails(self, tmp_path):
        out = tmp_path / "pairs.txt"

        result = CliRunner().invoke(main, [
            "-t", "0.9", "-d", str(tmp_path / "nope"), "-d", str(tmp_path), "-o", str(out),
        ])

        assert result.exit_code == 1
        assert "Unable to read directory" in result.output
        assert not out.exists()

    def test_threshold_required(self):
        result = CliRunner().invoke(main, [])
        assert result.exit_code == 2

    def test_threshold_must_be_float(self):
        result = CliRunner().invoke(main, ["--threshold", "high"])
        assert result.exit_code == 2

    def test_threshold_range_checked(self):
        result = CliRunner().invoke(main, ["--threshold", "1.5"])
        assert result.exit_code == 2
        assert "between 0 and 1" in result.output

    def test_version(self):
        result = CliRunner().invoke(main, ["--version"])
        assert __version__ in result.output
