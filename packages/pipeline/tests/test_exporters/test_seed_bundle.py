"""
tests/test_exporters/test_seed_bundle.py — Tests for the seed bundle exporter.
"""

from __future__ import annotations

import duckdb
import pytest

from plaincost_shared.db import connect_store, create_schema
from plaincost_pipeline.exporters.seed_bundle import (
    SCHEMA_FILE,
    apply_seed_bundle,
    bundle_files,
    chunked,
    export_seed_bundle,
    insert_statement,
    sql_literal,
)
from plaincost_pipeline.loaders.duckdb_loader import DuckDBLoader


def _row_count(path) -> int:
    return sum(1 for line in path.read_text().splitlines() if line.startswith("("))


def _table_rows(conn: duckdb.DuckDBPyConnection, table: str, order_by: str) -> list[tuple]:
    return conn.execute(f"SELECT * FROM {table} ORDER BY {order_by}").fetchall()


@pytest.fixture
def history_store(tmp_path):
    """A build store holding 1,250 metro history rows and nothing else."""
    db_path = tmp_path / "build.duckdb"
    conn = connect_store(db_path)
    create_schema(conn)
    rows = [(f"{i:05d}", 2022, 100.0 + i / 100, None, None, None) for i in range(1250)]
    DuckDBLoader(conn).insert_history("msa_history", rows)
    conn.close()
    return db_path


class TestSqlLiteral:
    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, "NULL"),
            (True, "1"),
            (False, "0"),
            (42, "42"),
            (88.5, "88.5"),
            (float("nan"), "NULL"),
            (float("inf"), "NULL"),
            ("Abilene, TX", "'Abilene, TX'"),
            ("Coeur d'Alene, ID", "'Coeur d''Alene, ID'"),
            ("back\\slash", "'back\\slash'"),
            ("", "''"),
            (b"\x01\xff", "X'01FF'"),
        ],
    )
    def test_literals(self, value, expected):
        assert sql_literal(value) == expected

    def test_nul_character_rejected(self):
        with pytest.raises(ValueError):
            sql_literal("bad\x00value")

    def test_unsupported_type_rejected(self):
        with pytest.raises(TypeError):
            sql_literal(object())


class TestInsertStatement:
    def test_format(self):
        sql = insert_statement("msa_history", ("cbsa", "year"), [("10180", 2022), ("35620", None)])
        assert sql == (
            "INSERT OR IGNORE INTO msa_history (cbsa,year) VALUES\n"
            "('10180',2022),\n"
            "('35620',NULL);\n"
        )

    def test_chunked_sizes(self):
        assert [len(c) for c in chunked(list(range(1250)), 500)] == [500, 500, 250]
        assert chunked([], 500) == []

    def test_chunked_rejects_zero(self):
        with pytest.raises(ValueError):
            chunked([1], 0)


class TestExport:
    def test_rows_split_into_chunks(self, history_store, tmp_path):
        seed_dir = tmp_path / "seed"
        result = export_seed_bundle(history_store, seed_dir, chunk_size=500)

        files = result.files_by_table["msa_history"]
        assert files == ["msa_history_00000.sql", "msa_history_00001.sql", "msa_history_00002.sql"]
        assert [_row_count(seed_dir / f) for f in files] == [500, 500, 250]
        assert result.rows_by_table["msa_history"] == 1250

    def test_empty_tables_write_no_files(self, history_store, tmp_path):
        result = export_seed_bundle(history_store, tmp_path / "seed")
        assert result.files_by_table["msas"] == []
        assert result.files_by_table["_stats"] == []
        assert result.total_files == 4

    def test_chunks_ordered_by_primary_key(self, history_store, tmp_path):
        seed_dir = tmp_path / "seed"
        export_seed_bundle(history_store, seed_dir, chunk_size=500)
        first = (seed_dir / "msa_history_00000.sql").read_text().splitlines()
        assert first[1].startswith("('00000',2022,")
        last = (seed_dir / "msa_history_00002.sql").read_text().splitlines()
        assert last[-1].startswith("('01249',2022,")

    def test_schema_file_written(self, history_store, tmp_path):
        seed_dir = tmp_path / "seed"
        export_seed_bundle(history_store, seed_dir)
        schema = (seed_dir / SCHEMA_FILE).read_text()
        assert "CREATE TABLE IF NOT EXISTS msas" in schema
        assert "CREATE INDEX IF NOT EXISTS idx_msas_rpp" in schema

    def test_stale_files_removed(self, history_store, tmp_path):
        seed_dir = tmp_path / "seed"
        seed_dir.mkdir()
        (seed_dir / "msas_00099.sql").write_text("-- stale")
        export_seed_bundle(history_store, seed_dir)
        assert not (seed_dir / "msas_00099.sql").exists()

    def test_missing_store_leaves_seed_dir_alone(self, tmp_path):
        seed_dir = tmp_path / "seed"
        seed_dir.mkdir()
        (seed_dir / "keep.sql").write_text("-- previous bundle")

        with pytest.raises(FileNotFoundError):
            export_seed_bundle(tmp_path / "missing.duckdb", seed_dir)
        assert (seed_dir / "keep.sql").exists()


class TestApply:
    def test_bundle_reproduces_build_store(self, built_store):
        cfg = built_store
        export_seed_bundle(cfg.db_path, cfg.seed_dir)

        target = duckdb.connect(":memory:")
        apply_seed_bundle(target, cfg.seed_dir)
        source = connect_store(cfg.db_path, read_only=True)
        try:
            for table, order_by in (
                ("msas", "cbsa"),
                ("states", "abbr"),
                ("msa_history", "cbsa, year"),
                ("state_history", "abbr, year"),
            ):
                assert _table_rows(target, table, order_by) == _table_rows(source, table, order_by)
        finally:
            source.close()
            target.close()

    def test_reapplying_is_a_noop(self, history_store, tmp_path):
        seed_dir = tmp_path / "seed"
        export_seed_bundle(history_store, seed_dir, chunk_size=500)

        target = duckdb.connect(":memory:")
        assert apply_seed_bundle(target, seed_dir) == 4
        before = _table_rows(target, "msa_history", "cbsa, year")
        apply_seed_bundle(target, seed_dir)
        assert _table_rows(target, "msa_history", "cbsa, year") == before
        assert len(before) == 1250
        target.close()

    def test_bundle_files_order(self, history_store, tmp_path):
        seed_dir = tmp_path / "seed"
        export_seed_bundle(history_store, seed_dir, chunk_size=500)
        names = [p.name for p in bundle_files(seed_dir)]
        assert names[0] == SCHEMA_FILE
        assert names[1:] == ["msa_history_00000.sql", "msa_history_00001.sql", "msa_history_00002.sql"]

    def test_missing_schema_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            bundle_files(tmp_path)
