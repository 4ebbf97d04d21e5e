"""
test_logging.py - logging setup and save-echo summaries

DoD:
- inline images summarized, not dumped
- PII masking opt-in
- configure_logging honors logging.level
"""

import json
import logging

from lingofy.core.logging import (
    configure_logging,
    format_payload,
    mask_pii,
    summarize_image,
    summarize_payload,
)
from lingofy.domain.schemas import ImageReference, StoreProfile


class TestSummarizeImage:

    def test_data_url_summarized(self, png_bytes):
        image = ImageReference.from_bytes(png_bytes, "image/png")

        assert summarize_image(image.data_url) == f"<image/png, {len(png_bytes)} bytes>"

    def test_plain_string_unchanged(self):
        assert summarize_image("Handcrafted Wonder") == "Handcrafted Wonder"


class TestSummarizePayload:

    def test_images_in_profile_summarized(self, png_bytes):
        image = ImageReference.from_bytes(png_bytes, "image/png")
        payload = StoreProfile().to_dict()
        payload["product"]["images"] = [image.data_url]

        result = summarize_payload(payload)

        assert result["product"]["images"] == [f"<image/png, {len(png_bytes)} bytes>"]
        assert result["product"]["price"] == 49.99
        # input untouched
        assert payload["product"]["images"] == [image.data_url]

    def test_no_masking_by_default(self):
        payload = {"contact": {"email": "hello@creator.com"}}

        assert summarize_payload(payload)["contact"]["email"] == "hello@creator.com"

    def test_masking(self):
        payload = {"contact": {"email": "hello@creator.com", "phone": "+1 (555) 123-4567"}}

        result = summarize_payload(payload, mask=True)

        assert result["contact"]["email"] == "[MASKED]"
        assert result["contact"]["phone"] == "[MASKED]"

    def test_format_payload_is_json(self):
        text = format_payload({"meta": {"siteName": "Store"}})

        assert json.loads(text) == {"meta": {"siteName": "Store"}}


def test_mask_pii_leaves_other_text():
    assert mask_pii("Global") == "Global"


def test_configure_logging_sets_level():
    configure_logging({"logging": {"level": "debug"}})

    assert logging.getLogger("lingofy").level == logging.DEBUG

    configure_logging({})

    assert logging.getLogger("lingofy").level == logging.INFO
