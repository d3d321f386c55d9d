import os
import uuid
from werkzeug.utils import secure_filename
from flask import current_app
from menu_cms.domain.exceptions import UnsupportedMediaError

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "text/plain",
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
}


def allowed_mime_type(mime_type):
    return (mime_type or "").lower() in ALLOWED_MIME_TYPES


def _stream_size(file):
    stream = file.stream
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


def check_file(file):
    """Reject disallowed types and oversized uploads before anything is written."""
    if not file or not file.filename:
        raise UnsupportedMediaError("No file was uploaded.")

    if not allowed_mime_type(file.mimetype):
        raise UnsupportedMediaError(
            "Invalid file type. Only PDF, DOC, DOCX, XLS, XLSX, PPT, PPTX, TXT, and image files are allowed."
        )

    max_size = current_app.config["MAX_FILE_SIZE"]
    size = _stream_size(file)
    if size > max_size:
        raise UnsupportedMediaError(
            f"File too large. Maximum size allowed is {max_size // (1024 * 1024)}MB."
        )
    return size


def save_file(file):
    """
    Store an uploaded file under UPLOAD_FOLDER.

    Returns the metadata kept on the page row.
    """
    size = check_file(file)

    original_name = file.filename
    safe_name = secure_filename(original_name) or "file"
    stem, ext = os.path.splitext(safe_name)
    stored_name = f"{stem}-{uuid.uuid4().hex}{ext.lower()}"

    upload_folder = current_app.config["UPLOAD_FOLDER"]
    os.makedirs(upload_folder, exist_ok=True)
    file_path = os.path.join(upload_folder, stored_name)

    file.save(file_path)
    current_app.logger.info("Stored upload %s (%d bytes)", stored_name, size)

    return {
        "file_name": stored_name,
        "original_file_name": original_name,
        "file_size": size,
        "file_mime_type": file.mimetype,
        "file_path": file_path,
    }


def resolve_path(file_path):
    if not os.path.isabs(file_path):
        file_path = os.path.join(current_app.root_path, file_path)
    return os.path.normpath(file_path)


def delete_file(file_path):
    """
    Best-effort removal of a stored file.

    Failures are logged and reported as False, never raised: the database
    change that released the file has already happened.
    """
    if not file_path:
        return False

    file_path = resolve_path(file_path)

    if not os.path.exists(file_path):
        current_app.logger.warning("File already gone: %s", file_path)
        return False

    try:
        os.remove(file_path)
        return True
    except OSError as e:
        current_app.logger.error(f"Failed to delete file {file_path}: {e}")
        return False
