"""QR payload tests."""
import base64

from attendance_tracker.services.qr_service import QRService


def test_parse_payload_accepts_numeric_string():
    is_valid, data, error = QRService.parse_payload('{"sessionId":"12","name":"Lecture"}')

    assert is_valid is True
    assert error is None
    assert data['sessionId'] == 12
    assert data['name'] == 'Lecture'


def test_parse_payload_rejects_bad_input():
    assert QRService.parse_payload('garbage')[0] is False
    assert QRService.parse_payload('[1, 2]')[0] is False
    assert QRService.parse_payload('{"name":"x"}')[2] == "Missing field: sessionId"
    assert QRService.parse_payload('{"sessionId":true}')[2] == "Invalid sessionId in QR code"
    assert QRService.parse_payload(None)[0] is False


def test_render_png():
    uri = QRService.render_png('{"sessionId":1}')

    prefix = 'data:image/png;base64,'
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]).startswith(b'\x89PNG')
