"""QR Code payload and image service."""
import base64
import io
import json
from typing import Dict, Optional, Tuple

import qrcode

PAYLOAD_FIELDS = ('sessionId', 'name', 'date', 'time', 'duration')


class QRService:
    """Service for QR code operations."""

    @staticmethod
    def build_payload(session) -> str:
        """Build the JSON string a student's scanner decodes."""
        qr_data = {
            'sessionId': session.id,
            'name': session.name,
            'date': session.date,
            'time': session.time,
            'duration': session.duration
        }
        return json.dumps(qr_data, separators=(',', ':'))

    @staticmethod
    def render_png(payload: str) -> str:
        """Render a payload as a base64 PNG data URI."""
        qr = qrcode.QRCode(
            version=None,  # Auto-determine size
            error_correction=qrcode.constants.ERROR_CORRECT_H,
            box_size=10,
            border=4,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        img_str = base64.b64encode(buffered.getvalue()).decode()

        return f"data:image/png;base64,{img_str}"

    @staticmethod
    def parse_payload(qr_data_string: str) -> Tuple[bool, Optional[Dict], Optional[str]]:
        """
        Validate scanned QR data.
        Returns: (is_valid, data, error_message)
        """
        try:
            qr_data = json.loads(qr_data_string)
        except (TypeError, ValueError):
            return False, None, "Invalid QR code format"

        if not isinstance(qr_data, dict):
            return False, None, "Invalid QR code format"

        session_id = qr_data.get('sessionId')
        if session_id is None:
            return False, None, "Missing field: sessionId"

        # Scanners sometimes hand back numeric ids as strings
        if isinstance(session_id, str) and session_id.isdigit():
            session_id = int(session_id)
        if not isinstance(session_id, int) or isinstance(session_id, bool):
            return False, None, "Invalid sessionId in QR code"

        qr_data['sessionId'] = session_id
        return True, qr_data, None
