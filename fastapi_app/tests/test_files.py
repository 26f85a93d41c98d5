"""
Тесты загрузки файлов, вложений в анализ и задачи очистки
"""

from datetime import datetime, timedelta, timezone

from analysis import AttachmentContent, build_analysis_input, extract_pdf_text
from models import UploadedFile

from .conftest import CRON_SECRET

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64
PDF_TEXT = "Deposit required before viewing"


def make_text_pdf(text: str) -> bytes:
    """Минимальный одностраничный PDF с текстом, набранным Helvetica"""
    stream = f"BT /F1 12 Tf 72 720 Td ({text}) Tj ET".encode("latin-1")
    objects = [
        b"<< /Type /Catalog /Pages 2 0 R >>",
        b"<< /Type /Pages /Kids [3 0 R] /Count 1 >>",
        b"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 612 792] "
        b"/Resources << /Font << /F1 5 0 R >> >> /Contents 4 0 R >>",
        b"<< /Length %d >>\nstream\n" % len(stream) + stream + b"\nendstream",
        b"<< /Type /Font /Subtype /Type1 /BaseFont /Helvetica >>",
    ]
    pdf = bytearray(b"%PDF-1.4\n")
    offsets = []
    for number, body in enumerate(objects, start=1):
        offsets.append(len(pdf))
        pdf += b"%d 0 obj\n" % number + body + b"\nendobj\n"
    xref_offset = len(pdf)
    pdf += b"xref\n0 %d\n0000000000 65535 f \n" % (len(objects) + 1)
    for offset in offsets:
        pdf += b"%010d 00000 n \n" % offset
    pdf += b"trailer\n<< /Size %d /Root 1 0 R >>\nstartxref\n%d\n%%%%EOF\n" % (len(objects) + 1, xref_offset)
    return bytes(pdf)


def create_chat(client, headers):
    return client.post("/chats/", json={"title": "Uploads"}, headers=headers).json()["id"]


def upload(client, headers, chat_id, name="photo.png", data=PNG_BYTES, content_type="image/png"):
    return client.post(
        "/files/upload",
        files={"file": (name, data, content_type)},
        data={"chat_id": str(chat_id)},
        headers=headers,
    )


# ==================== Attachments ====================


def test_build_input_counts_images_and_skips_empty_pdf():
    text, images = build_analysis_input(
        "Profile text",
        [
            AttachmentContent(filename="a.png", content_type="image/png"),
            AttachmentContent(filename="b.jpg", content_type="image/jpeg"),
            AttachmentContent(filename="c.pdf", content_type="application/pdf", data=b"not a pdf"),
        ],
    )

    assert text == "Profile text"
    assert images == 2


def test_extract_pdf_text_from_garbage_is_empty():
    assert extract_pdf_text(b"%PDF-broken") == ""


def test_extract_pdf_text_reads_text_layer():
    assert PDF_TEXT in extract_pdf_text(make_text_pdf(PDF_TEXT))


def test_build_input_appends_pdf_text_under_header():
    text, images = build_analysis_input(
        "Lease offer",
        [AttachmentContent(filename="lease.pdf", content_type="application/pdf", data=make_text_pdf(PDF_TEXT))],
    )

    assert images == 0
    assert text.startswith("Lease offer\n\n[Attached PDF: lease.pdf]\n")
    assert PDF_TEXT in text


# ==================== Upload ====================


def test_upload_and_download(client, auth_headers, fake_storage):
    chat_id = create_chat(client, auth_headers)

    response = upload(client, auth_headers, chat_id, name="my photo.png")

    assert response.status_code == 201
    body = response.json()
    assert body["pathname"] == "my_photo.png"
    assert body["content_type"] == "image/png"
    assert body["url"] == f"/files/{body['id']}"
    assert len(fake_storage.objects) == 1
    object_name = next(iter(fake_storage.objects))
    assert object_name.startswith(f"red-flag-detector/{chat_id}/")
    assert object_name.endswith("-my_photo.png")

    download = client.get(body["url"], headers=auth_headers)
    assert download.status_code == 200
    assert download.content == PNG_BYTES
    assert download.headers["content-type"] == "image/png"
    assert fake_storage.blocking_calls == []


def test_jpg_alias_is_normalized(client, auth_headers):
    chat_id = create_chat(client, auth_headers)

    response = upload(client, auth_headers, chat_id, name="a.jpg", content_type="image/jpg")

    assert response.status_code == 201
    assert response.json()["content_type"] == "image/jpeg"


def test_upload_rejects_unsupported_type(client, auth_headers):
    chat_id = create_chat(client, auth_headers)

    response = upload(client, auth_headers, chat_id, name="notes.txt", data=b"hello", content_type="text/plain")

    assert response.status_code == 400
    assert response.json()["message"] == "File type should be JPEG, PNG, or PDF"


def test_upload_rejects_empty_file(client, auth_headers):
    chat_id = create_chat(client, auth_headers)

    response = upload(client, auth_headers, chat_id, data=b"")

    assert response.status_code == 400


def test_upload_to_foreign_chat_is_not_found(client, auth_headers):
    response = upload(client, auth_headers, 9999)

    assert response.status_code == 404


def test_image_attachment_is_noted_in_analysis(client, auth_headers, analyzer_llm):
    chat_id = create_chat(client, auth_headers)
    file_id = upload(client, auth_headers, chat_id).json()["id"]

    response = client.post(
        "/analysis",
        json={"content": "Check my dating profile", "chat_id": chat_id, "file_ids": [file_id]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    human_message = analyzer_llm.calls[0][1]
    assert "[Note: 1 image(s) were uploaded for analysis]" in human_message.content

    messages = client.get(f"/chats/{chat_id}/messages", headers=auth_headers).json()["messages"]
    user_message = next(m for m in messages if m["role"] == "user")
    assert user_message["attachments"][0]["id"] == file_id


def test_pdf_attachment_text_reaches_analyzer(client, auth_headers, analyzer_llm, fake_storage):
    chat_id = create_chat(client, auth_headers)
    uploaded = upload(
        client, auth_headers, chat_id, name="lease.pdf", data=make_text_pdf(PDF_TEXT), content_type="application/pdf"
    )
    assert uploaded.status_code == 201

    response = client.post(
        "/analysis",
        json={"content": "Is this lease legit?", "chat_id": chat_id, "file_ids": [uploaded.json()["id"]]},
        headers=auth_headers,
    )

    assert response.status_code == 200
    human_message = analyzer_llm.calls[0][1]
    assert "[Attached PDF: lease.pdf]" in human_message.content
    assert PDF_TEXT in human_message.content
    assert "image(s) were uploaded" not in human_message.content
    # Обращения к MinIO не выполняются в потоке event loop
    assert fake_storage.blocking_calls == []


def test_analysis_with_unknown_file_is_not_found(client, auth_headers):
    chat_id = create_chat(client, auth_headers)

    response = client.post(
        "/analysis",
        json={"content": "text", "chat_id": chat_id, "file_ids": ["00000000-0000-0000-0000-000000000001"]},
        headers=auth_headers,
    )

    assert response.status_code == 404


# ==================== Cleanup ====================


def _expire_all_files(db_session):
    past = datetime.now(timezone.utc) - timedelta(days=1)
    for uploaded in db_session.query(UploadedFile).all():
        uploaded.auto_delete_at = past
    db_session.commit()


def test_cleanup_requires_secret(client):
    assert client.get("/cron/cleanup-files").status_code == 401
    assert (
        client.get("/cron/cleanup-files", headers={"Authorization": "Bearer wrong"}).status_code == 401
    )


def test_cleanup_without_configured_secret(client, monkeypatch):
    from config import get_settings

    monkeypatch.setattr(get_settings(), "cron_secret", "")

    response = client.get("/cron/cleanup-files", headers={"Authorization": "Bearer "})

    assert response.status_code == 500


def test_cleanup_with_nothing_to_delete(client):
    response = client.get("/cron/cleanup-files", headers={"Authorization": f"Bearer {CRON_SECRET}"})

    assert response.status_code == 200
    assert response.json()["message"] == "No files to delete"


def test_cleanup_deletes_expired_files(client, auth_headers, fake_storage, db_session):
    chat_id = create_chat(client, auth_headers)
    upload(client, auth_headers, chat_id, name="one.png")
    upload(client, auth_headers, chat_id, name="two.png")
    failing = sorted(fake_storage.objects)[0]
    fake_storage.failing_deletes.add(failing)
    _expire_all_files(db_session)

    response = client.get("/cron/cleanup-files", headers={"Authorization": f"Bearer {CRON_SECRET}"})

    assert response.status_code == 200
    body = response.json()
    assert body["deleted"] == 1
    assert body["failed"] == 1
    assert body["details"]["failed"] == [failing]
    assert list(fake_storage.objects) == [failing]

    db_session.expire_all()
    remaining = db_session.query(UploadedFile).filter(UploadedFile.deleted_at.is_(None)).all()
    assert [f.object_name for f in remaining] == [failing]


def test_cleanup_continues_after_database_error(client, auth_headers, fake_storage, db_session, monkeypatch):
    from repositories import FileRepository

    chat_id = create_chat(client, auth_headers)
    upload(client, auth_headers, chat_id, name="one.png")
    upload(client, auth_headers, chat_id, name="two.png")
    _expire_all_files(db_session)

    original_mark_deleted = FileRepository.mark_deleted
    broken: list = []

    def mark_deleted_once_broken(self, uploaded_file):
        if not broken:
            broken.append(uploaded_file.object_name)
            raise RuntimeError("database is locked")
        return original_mark_deleted(self, uploaded_file)

    monkeypatch.setattr(FileRepository, "mark_deleted", mark_deleted_once_broken)

    response = client.get("/cron/cleanup-files", headers={"Authorization": f"Bearer {CRON_SECRET}"})

    assert response.status_code == 200
    body = response.json()
    assert body["deleted"] == 1
    assert body["failed"] == 1
    assert body["details"]["failed"] == broken

    # Файл с ошибкой остаётся активным и будет обработан следующим запуском
    db_session.expire_all()
    remaining = db_session.query(UploadedFile).filter(UploadedFile.deleted_at.is_(None)).all()
    assert [f.object_name for f in remaining] == broken
