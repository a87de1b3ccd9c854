# /tests/test_file_store.py
from __future__ import annotations

from tests.fakes import MemorySink
from webbot.adapters.storage.file_store import FileStore
from webbot.domain.document import Document
from webbot.domain.harvest import data_filename, harvest
from webbot.domain.http_response import HttpResponse


def _doc(ident: str, url: str, body: bytes, status: int = 200) -> Document:
    return Document(HttpResponse.build(status, "text/html", body, [f"HTTP/1.1 {status} X"], url), ident)


def test_store_writes_and_overwrites(tmp_path) -> None:
    store = FileStore(str(tmp_path))
    first = store.store("page.dat", "first version, longer")
    assert first.ok and first.path == str(tmp_path / "page.dat")

    second = store.store("page.dat", b"second")
    assert second.ok
    assert (tmp_path / "page.dat").read_bytes() == b"second"


def test_store_missing_directory(tmp_path) -> None:
    result = FileStore(str(tmp_path / "nope")).store("a.dat", "x")
    assert result.ok is False
    assert "Invalid data storage directory" in result.reason


def test_store_unwritable_directory(tmp_path, monkeypatch) -> None:
    # root ignores mode bits, so stub the access check itself
    monkeypatch.setattr("webbot.adapters.storage.file_store.os.access", lambda path, mode: False)
    result = FileStore(str(tmp_path)).store("a.dat", "x")
    assert result.ok is False
    assert "not writable" in result.reason
    assert not (tmp_path / "a.dat").exists()


def test_store_write_error_is_reported(tmp_path) -> None:
    # a directory sitting where the file should go cannot be replaced by a write
    (tmp_path / "taken.dat").mkdir()
    result = FileStore(str(tmp_path)).store("taken.dat", "x")
    assert result.ok is False
    assert "Failed to save data" in result.reason


def test_data_filename_is_url_safe() -> None:
    assert data_filename("http://localhost:5000/test.php") == "http%3A%2F%2Flocalhost%3A5000%2Ftest.php.dat"


def test_harvest_stores_found_values() -> None:
    sink = MemorySink()
    docs = [
        _doc("index", "http://a.test/", b"<title>Home</title>"),
        _doc("blank", "http://b.test/", b"<p>no title</p>"),
    ]
    items = harvest(docs, "<title>", "</title>", sink, include_raw=True)

    assert [i.value for i in items] == ["Home", None]
    assert items[0].stored is True and items[0].raw == "<title>Home</title>"
    assert items[1].stored is False and items[1].error == "Data not found"
    assert sink.files == {data_filename("http://a.test/"): "Home"}


def test_harvest_reports_sink_failures() -> None:
    items = harvest([_doc("a", "http://a.test/", b"<b>x</b>")], "<b>", "</b>", MemorySink(fail_with="disk full"))
    assert items[0].value == "x"
    assert items[0].stored is False
    assert items[0].error == "disk full"


def test_harvest_without_sink_only_extracts() -> None:
    items = harvest([_doc("a", "http://a.test/", b"<b>x</b>")], "<b>", "</b>")
    assert items[0].value == "x" and items[0].stored is False and items[0].error is None


def test_harvest_treats_empty_span_as_not_found() -> None:
    sink = MemorySink()
    items = harvest([_doc("a", "http://a.test/", b"<title></title>")], "<title>", "</title>", sink)
    assert items[0].value is None
    assert items[0].stored is False
    assert items[0].error == "Data not found"
    assert sink.files == {}
