"""HTTP tests for the FileDrop server."""

import pytest
from fastapi.testclient import TestClient

from server.main import app
from server.repositories.file_repository import FileRepository
from server.service_locator import set_upload_manager

TOKEN = "s3cret-management-token"
AUTH = {"Authorization": f"Bearer {TOKEN}"}


@pytest.fixture
def client(manager, monkeypatch):
    monkeypatch.setattr("server.config.MANAGEMENT_TOKEN", TOKEN)
    monkeypatch.setattr("server.config.SESSION_TTL_SECONDS", 0)
    set_upload_manager(manager)
    with TestClient(app) as test_client:
        yield test_client
    set_upload_manager(None)


BOUNDARY = "filedrop-test-boundary"


def streamed_multipart(field, filename, content, piece=100):
    """Multipart body as a generator, so the client sends it without Content-Length."""
    yield f"--{BOUNDARY}\r\n".encode()
    yield f'Content-Disposition: form-data; name="{field}"; filename="{filename}"\r\n'.encode()
    yield b"Content-Type: application/octet-stream\r\n\r\n"
    for start in range(0, len(content), piece):
        yield content[start:start + piece]
    yield f"\r\n--{BOUNDARY}--\r\n".encode()


def post_streamed(client, path, field, filename, content, extra_headers=None):
    headers = {**AUTH, "Content-Type": f"multipart/form-data; boundary={BOUNDARY}"}
    headers.update(extra_headers or {})
    return client.post(path, content=streamed_multipart(field, filename, content), headers=headers)


def upload(client, name, content, headers=AUTH):
    return client.post(
        "/manage/upload/file",
        files={"file": (name, content)},
        headers=headers,
    )


class TestAuthentication:

    def test_missing_token_is_forbidden(self, client):
        response = client.get("/manage/files")

        assert response.status_code == 403
        assert response.json()["code"] == "FORBIDDEN"

    def test_wrong_token_is_forbidden(self, client):
        response = client.get("/manage/files", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 403

    def test_raw_and_bearer_tokens_accepted(self, client):
        assert client.get("/manage/files", headers={"Authorization": TOKEN}).status_code == 200
        assert client.get("/manage/files", headers=AUTH).status_code == 200

    def test_empty_configured_token_refuses_everything(self, client, monkeypatch):
        monkeypatch.setattr("server.config.MANAGEMENT_TOKEN", "")

        response = client.get("/manage/files", headers={"Authorization": ""})
        assert response.status_code == 403

    def test_forbidden_upload_stores_nothing(self, client, manager):
        response = upload(client, "a.txt", b"data", headers={})

        assert response.status_code == 403
        assert FileRepository.count() == 0

    def test_download_needs_no_token(self, client):
        file_id = upload(client, "public.txt", b"anyone can read").json()["id"]

        response = client.get(f"/files/{file_id}")

        assert response.status_code == 200
        assert response.content == b"anyone can read"


class TestWholeFileUpload:

    def test_upload_and_dedup(self, client):
        first = upload(client, "notes.txt", b"hello")
        second = upload(client, "other-name.md", b"hello")

        assert first.status_code == 200
        assert first.json()["existed"] is False
        assert first.json()["id"].endswith(".txt")
        assert second.status_code == 200
        assert second.json() == {"id": first.json()["id"], "existed": True}
        assert FileRepository.count() == 1

    def test_wrong_field_name(self, client):
        response = client.post(
            "/manage/upload/file",
            files={"upload": ("a.txt", b"data")},
            headers=AUTH,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "INVALID_REQUEST"

    def test_not_multipart(self, client):
        response = client.post(
            "/manage/upload/file",
            content=b"raw body",
            headers={**AUTH, "Content-Type": "application/octet-stream"},
        )
        assert response.status_code == 400

    def test_request_body_limit(self, client, monkeypatch):
        monkeypatch.setattr("server.config.MAX_REQUEST_BODY", 100)

        response = upload(client, "big.bin", b"x" * 1000)

        assert response.status_code == 413
        assert response.json()["code"] == "REQUEST_TOO_LARGE"
        assert FileRepository.count() == 0

    def test_streamed_body_without_content_length_is_capped(self, client, manager, monkeypatch):
        monkeypatch.setattr("server.config.MAX_REQUEST_BODY", 100)

        response = post_streamed(client, "/manage/upload/file", "file", "big.bin", b"x" * 1000)

        assert response.status_code == 413
        assert response.json()["code"] == "REQUEST_TOO_LARGE"
        assert FileRepository.count() == 0
        assert list(manager.store.base_dir.iterdir()) == []

    def test_streamed_body_within_limit_is_stored(self, client, monkeypatch):
        monkeypatch.setattr("server.config.MAX_REQUEST_BODY", 10_000)

        response = post_streamed(client, "/manage/upload/file", "file", "small.bin", b"y" * 1000)

        assert response.status_code == 200
        assert response.json()["existed"] is False
        assert client.get(f"/files/{response.json()['id']}").content == b"y" * 1000


class TestListAndDelete:

    def test_list_pages(self, client):
        for i in range(12):
            upload(client, f"f{i}.txt", f"content {i}".encode())

        first = client.get("/manage/files", params={"page": 1}, headers=AUTH).json()
        second = client.get("/manage/files", params={"page": 2}, headers=AUTH).json()

        assert first["total"] == 12
        assert len(first["files"]) == 10
        assert len(second["files"]) == 2
        assert set(first["files"][0]) == {"id", "filename", "bytes"}

    def test_list_defaults_to_first_page(self, client):
        upload(client, "a.txt", b"a")

        response = client.get("/manage/files", headers=AUTH)

        assert response.json()["files"][0]["filename"] == "a.txt"

    def test_delete(self, client):
        file_id = upload(client, "a.txt", b"bye").json()["id"]

        response = client.delete(f"/manage/files/{file_id}", headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
        assert client.get(f"/files/{file_id}").status_code == 404

    def test_delete_unknown(self, client):
        response = client.delete("/manage/files/missing", headers=AUTH)

        assert response.status_code == 404
        assert response.json()["code"] == "FILE_NOT_FOUND"

    def test_download_unknown(self, client):
        response = client.get("/files/0123456789abcdef")
        assert response.status_code == 404


class TestChunkedUpload:

    def begin(self, client, name, size):
        return client.post(
            "/manage/upload/begin_chunks",
            json={"filename": name},
            headers={**AUTH, "Content-Range": str(size)},
        )

    def chunk(self, client, upload_id, data, offset):
        return client.post(
            f"/manage/upload/chunk/{upload_id}",
            files={"chunk": ("blob", data)},
            headers={**AUTH, "Content-Range": str(offset)},
        )

    def test_full_flow(self, client):
        content = bytes(range(20))
        upload_id = self.begin(client, "movie.mp4", 20).json()["id"]

        assert self.chunk(client, upload_id, content[10:], 10).status_code == 200
        assert self.chunk(client, upload_id, content[:10], 0).status_code == 200

        response = client.post("/manage/upload/end_chunks", json={"id": upload_id}, headers=AUTH)

        assert response.status_code == 200
        body = response.json()
        assert body["existed"] is False
        assert body["id"].endswith(".mp4")
        assert client.get(f"/files/{body['id']}").content == content

    def test_chunked_duplicate_reports_existing(self, client):
        existing = upload(client, "a.bin", b"0123").json()["id"]
        upload_id = self.begin(client, "b.bin", 4).json()["id"]
        self.chunk(client, upload_id, b"0123", 0)

        response = client.post("/manage/upload/end_chunks", json={"id": upload_id}, headers=AUTH)

        assert response.json() == {"id": existing, "existed": True}

    def test_begin_above_limit(self, client, manager):
        response = self.begin(client, "huge.bin", manager.sessions.size_limit + 1)

        assert response.status_code == 413
        assert response.json()["code"] == "FILE_TOO_LARGE"

    def test_chunk_out_of_bounds(self, client):
        upload_id = self.begin(client, "a.bin", 4).json()["id"]

        response = self.chunk(client, upload_id, b"abc", 3)

        assert response.status_code == 416
        assert response.json()["code"] == "CHUNK_OUT_OF_BOUNDS"

    def test_chunk_for_unknown_session(self, client):
        response = self.chunk(client, "feedfacefeedface", b"abc", 0)

        assert response.status_code == 404
        assert response.json()["code"] == "INVALID_UPLOAD_ID"

    def test_chunk_wrong_field_name(self, client):
        upload_id = self.begin(client, "a.bin", 4).json()["id"]

        response = client.post(
            f"/manage/upload/chunk/{upload_id}",
            files={"file": ("blob", b"ab")},
            headers={**AUTH, "Content-Range": "0"},
        )

        assert response.status_code == 400

    def test_discard(self, client):
        upload_id = self.begin(client, "a.bin", 4).json()["id"]

        assert client.post(f"/manage/upload/discard/{upload_id}", headers=AUTH).status_code == 200

        response = client.post("/manage/upload/end_chunks", json={"id": upload_id}, headers=AUTH)
        assert response.status_code == 404

    def test_discard_unknown_is_ok(self, client):
        response = client.post("/manage/upload/discard/unknown", headers=AUTH)
        assert response.status_code == 200

    def test_missing_content_range_means_empty_file(self, client):
        response = client.post(
            "/manage/upload/begin_chunks",
            json={"filename": "empty.txt"},
            headers=AUTH,
        )
        upload_id = response.json()["id"]

        end = client.post("/manage/upload/end_chunks", json={"id": upload_id}, headers=AUTH)

        assert end.status_code == 200
        assert client.get(f"/files/{end.json()['id']}").content == b""


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "filedrop"}


def test_request_id_header(client):
    response = client.get("/health")
    assert "X-Request-ID" in response.headers


@pytest.mark.parametrize("value,expected", [
    (None, 0),
    ("", 0),
    ("1024", 1024),
    (" 42 ", 42),
    ("bytes 0-9/10", 0),
    ("-5", 0),
])
def test_parse_content_range(value, expected):
    from server.routes.manage_routes import parse_content_range
    assert parse_content_range(value) == expected


def test_streamed_chunk_over_limit_leaves_session_untouched(client, monkeypatch):
    upload_id = client.post(
        "/manage/upload/begin_chunks",
        json={"filename": "big.bin"},
        headers={**AUTH, "Content-Range": "1000"},
    ).json()["id"]
    monkeypatch.setattr("server.config.MAX_REQUEST_BODY", 100)

    response = post_streamed(
        client, f"/manage/upload/chunk/{upload_id}", "chunk", "blob", b"z" * 1000,
        extra_headers={"Content-Range": "0"},
    )
    assert response.status_code == 413
    assert response.json()["code"] == "REQUEST_TOO_LARGE"

    monkeypatch.setattr("server.config.MAX_REQUEST_BODY", 10_000)
    end = client.post("/manage/upload/end_chunks", json={"id": upload_id}, headers=AUTH)
    assert client.get(f"/files/{end.json()['id']}").content == b"\x00" * 1000
