"""Tests for INCLUDE_ASM cross-referencing."""

import logging
from pathlib import Path

import pytest

from asmdups.core.errors import TraversalError
from asmdups.core.markers import DecompiledIndex, IncludeAsmEntry, parse_include_asm, scan_include_asm
from asmdups.core.windows import apply_sliding_window

from conftest import make_function


class TestParseIncludeAsm:
    """Test marker line parsing."""

    def test_two_argument_form(self):
        entry = parse_include_asm('INCLUDE_ASM("asm/us/st/nz0/nonmatchings/1B0", func_801B0000);',
                                  "src/a.c", "root")
        assert entry.asm_path == str(Path("root/asm/us/st/nz0/nonmatchings/1B0/func_801B0000.s"))
        assert entry.path == "src/a.c"

    def test_typed_form_with_backslashes(self):
        line = 'INCLUDE_ASM(const s32, "os\\loadersys", ResolveRelocation);'
        entry = parse_include_asm(line, "src/os/loadersys.c", "asm/nonmatchings")
        assert entry.asm_path == str(Path("asm/nonmatchings/os/loadersys/ResolveRelocation.s"))
        assert entry.line == line

    def test_non_matching_line(self):
        assert parse_include_asm("// INCLUDE_ASM is a macro", "a.c", "root") is None


class TestScanIncludeAsm:
    """Test scanning a source tree."""

    def test_recursive_scan(self, tmp_path):
        src = tmp_path / "src"
        (src / "os" / "sub").mkdir(parents=True)
        (src / "os" / "a.c").write_text(
            '#include "common.h"\n\n'
            'INCLUDE_ASM(const s32, "os\\a", FuncA);\n\n'
            's32 FuncB(void) { return 0; }\n'
        )
        (src / "os" / "sub" / "b.c").write_text('INCLUDE_ASM("os/sub/b", FuncC);\n')
        (src / "os" / "readme.txt").write_text('INCLUDE_ASM("ignored", Nope);\n')

        entries = scan_include_asm(src, tmp_path / "asm")

        assert sorted(Path(e.asm_path).name for e in entries) == ["FuncA.s", "FuncC.s"]

    def test_unrecognized_marker_logged(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="asmdups")
        (tmp_path / "a.c").write_text("#define INCLUDE_ASM(FOLDER, NAME)\n")

        assert scan_include_asm(tmp_path, "asm") == []
        assert "Unrecognized INCLUDE_ASM line" in caplog.text

    def test_missing_source_dir_raises(self, tmp_path):
        with pytest.raises(TraversalError):
            scan_include_asm(tmp_path / "nope", "asm")


class TestDecompiledIndex:
    """Test the decompiled lookup."""

    def test_included_function_is_not_decompiled(self, tmp_path):
        asm_path = tmp_path / "asm" / "os" / "FuncA.s"
        index = DecompiledIndex([
            IncludeAsmEntry(line='INCLUDE_ASM("os", FuncA);', path="a.c", asm_path=str(asm_path)),
        ])

        assert index.is_decompiled(asm_path, "FuncA") is False
        assert index.is_decompiled(tmp_path / "asm" / "os" / "FuncB.s", "FuncB") is True
        assert index.is_decompiled(asm_path, "Other") is True
        assert len(index) == 1

    def test_paths_are_normalized(self, tmp_path):
        index = DecompiledIndex([
            IncludeAsmEntry(line='INCLUDE_ASM("os", FuncA);', path="a.c",
                            asm_path=str(tmp_path / "x" / ".." / "asm" / "FuncA.s")),
        ])
        assert index.is_decompiled(tmp_path / "asm" / "FuncA.s", "FuncA") is False

    def test_mark_uses_parent_name_for_fragments(self, tmp_path):
        asm_path = str(tmp_path / "FuncA.s")
        parent = make_function("FuncA", list(range(36)), file=asm_path)
        other = make_function("FuncB", [1, 2], file=str(tmp_path / "FuncB.s"))
        fragments = apply_sliding_window(parent, 4, 32)
        index = DecompiledIndex([
            IncludeAsmEntry(line='INCLUDE_ASM("", FuncA);', path="a.c", asm_path=asm_path),
        ])

        index.mark([parent, other] + fragments)

        assert parent.decompiled is False
        assert all(f.decompiled is False for f in fragments)
        assert other.decompiled is True
