"""
Flask REST API over MovieIdentifierApp.

Exposes the session state machine to a browser UI: upload an image, remove it,
trigger identification, and poll the current state.
"""
import logging
import os
import uuid
from typing import Optional

from flask import Flask, jsonify, request, session
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

from .app import MovieIdentifierApp
from .config_loader import load_config_from_env
from .exceptions import ConfigurationError, InvalidTransitionError, SessionBusyError
from .schemas import ImageUpload
from .security import FileValidator

logger = logging.getLogger(__name__)

# Multipart overhead allowed on top of the image size limit
UPLOAD_OVERHEAD_BYTES = 64 * 1024


def _session_id() -> str:
    if "session_id" not in session:
        session["session_id"] = str(uuid.uuid4())
    return session["session_id"]


def create_app(identifier_app: Optional[MovieIdentifierApp] = None) -> Flask:
    """
    Build the Flask application.
    
    :param identifier_app: Pre-built MovieIdentifierApp (tests); when omitted the
        configuration is loaded from the environment
    :return: Flask app. Routes answer 500 if the identifier could not be initialized.
    """
    app = Flask(__name__)
    app.secret_key = os.environ.get("FLASK_SECRET_KEY", os.urandom(32).hex())

    limiter = Limiter(
        key_func=get_remote_address,
        app=app,
        default_limits=["100 per hour", "10 per minute"],
        storage_uri="memory://",
    )

    if identifier_app is None:
        try:
            identifier_app = MovieIdentifierApp(load_config_from_env())
            identifier_app.initialize()
            logger.info("Identifier initialized from environment variables")
        except ConfigurationError as e:
            logger.error(f"Failed to initialize identifier: {str(e)}")
            identifier_app = None
    else:
        identifier_app.initialize()

    if identifier_app is not None:
        app.config["MAX_CONTENT_LENGTH"] = (
            identifier_app.config.max_upload_bytes + UPLOAD_OVERHEAD_BYTES
        )

    def not_initialized():
        return jsonify({"error": "Identifier not initialized. Please check configuration."}), 500

    @app.route("/health")
    @limiter.exempt
    def health():
        return jsonify({"status": "ok", "initialized": identifier_app is not None})

    @app.route("/state", methods=["GET"])
    @limiter.exempt
    def get_state():
        """Current session state for the UI."""
        if identifier_app is None:
            return not_initialized()
        return jsonify(identifier_app.get_state(_session_id()).to_dict())

    @app.route("/image", methods=["POST"])
    @limiter.limit("30 per minute")
    def select_image():
        """Select an image (multipart field 'image')."""
        if identifier_app is None:
            return not_initialized()

        if "image" not in request.files:
            return jsonify({"error": "Missing 'image' file in form data"}), 400

        file = request.files["image"]
        if not file.filename:
            return jsonify({"error": "Empty file"}), 400

        data = file.read()
        mime_type = file.mimetype
        if mime_type not in FileValidator.ALLOWED_MIME_TYPES:
            # Browsers sometimes send application/octet-stream
            mime_type = FileValidator.guess_mime_type(file.filename) or mime_type
        is_valid, error_msg = FileValidator.validate_image_bytes(
            data, mime_type, max_size=identifier_app.config.max_upload_bytes
        )
        if not is_valid:
            logger.warning(f"File validation failed: {error_msg}")
            return jsonify({"error": f"File validation failed: {error_msg}"}), 400

        session_id = _session_id()
        image = ImageUpload(filename=file.filename, mime_type=mime_type, data=data)
        try:
            state = identifier_app.select_image(image, session_id=session_id)
        except SessionBusyError as e:
            return jsonify({"error": str(e)}), 409

        logger.info(f"Image selected - Session: {session_id}, File: {file.filename}")
        return jsonify(state.to_dict())

    @app.route("/image", methods=["DELETE"])
    def clear_image():
        """Remove the image and any previous result."""
        if identifier_app is None:
            return not_initialized()
        try:
            state = identifier_app.clear_image(session_id=_session_id())
        except SessionBusyError as e:
            return jsonify({"error": str(e)}), 409
        return jsonify(state.to_dict())

    @app.route("/identify", methods=["POST"])
    @limiter.limit("10 per minute")
    async def identify():
        """Identify the selected image; answers with the terminal state."""
        if identifier_app is None:
            return not_initialized()

        session_id = _session_id()
        try:
            state = await identifier_app.identify(session_id=session_id)
        except SessionBusyError as e:
            return jsonify({"error": str(e)}), 409
        except InvalidTransitionError as e:
            return jsonify({"error": str(e)}), 400

        logger.info(f"Identify finished - Session: {session_id}, Status: {state.name}")
        return jsonify(state.to_dict())

    return app
