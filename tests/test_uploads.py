import re

from routes.uploads import IMAGE_MAX_BYTES, sanitize_filename, stored_filename


def test_upload_generic_file(client, upload_dir):
    response = client.post(
        "/api/upload",
        files={"file": ("site plan (v2).pdf", b"%PDF-1.4 data", "application/pdf")},
        data={"fileType": "file"},
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert re.fullmatch(r"\d{13}-site_plan__v2_\.pdf", data["filename"])
    assert data["url"] == f"/uploads/{data['filename']}"
    assert (upload_dir / data["filename"]).read_bytes() == b"%PDF-1.4 data"

    served = client.get(data["url"])
    assert served.status_code == 200
    assert served.content == b"%PDF-1.4 data"


def test_upload_image(client, upload_dir):
    response = client.post(
        "/api/upload",
        files={"file": ("cover.png", b"\x89PNG", "image/png")},
        data={"fileType": "image"},
    )
    assert response.status_code == 200
    assert (upload_dir / response.json()["data"]["filename"]).exists()


def test_non_image_rejected_before_any_write(client, upload_dir):
    response = client.post(
        "/api/upload",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        data={"fileType": "image"},
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "File must be an image"}
    assert not upload_dir.exists()


def test_size_limits(client, upload_dir):
    too_big_image = b"0" * (IMAGE_MAX_BYTES + 1)
    response = client.post(
        "/api/upload",
        files={"file": ("big.png", too_big_image, "image/png")},
        data={"fileType": "image"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "File size must be less than 5MB"

    # the same payload is within the generic 10MB limit
    response = client.post("/api/upload", files={"file": ("big.bin", too_big_image, "application/octet-stream")})
    assert response.status_code == 200


def test_missing_file(client):
    response = client.post("/api/upload", data={"fileType": "image"})
    assert response.status_code == 400
    assert response.json()["error"] == "No file provided"


def test_filename_helpers():
    assert sanitize_filename("my photo#1.JPG") == "my_photo_1.JPG"
    assert sanitize_filename("a-b.c") == "a-b.c"
    assert stored_filename("x y.png", now_ms=1700000000123) == "1700000000123-x_y.png"


def test_serving_follows_current_upload_dir(client, tmp_path, monkeypatch):
    moved = tmp_path / "elsewhere"
    monkeypatch.setenv("UPLOAD_DIR", str(moved))
    url = client.post("/api/upload", files={"file": ("a.txt", b"moved", "text/plain")}).json()["data"]["url"]
    assert (moved / url.rsplit("/", 1)[1]).exists()
    assert client.get(url).content == b"moved"


def test_serving_missing_or_escaping_paths_is_404(client, upload_dir):
    upload_dir.mkdir(parents=True)
    (upload_dir.parent / "secret.txt").write_text("nope")
    assert client.get("/uploads/missing.png").json() == {"success": False, "error": "File not found"}
    assert client.get("/uploads/..%2Fsecret.txt").status_code == 404
