from __future__ import annotations

import logging

from docassembler.domain.models import DeliveryMethod, DeliveryReceipt
from docassembler.infrastructure.save_dialog import SavePrompt

logger = logging.getLogger(__name__)


class DeliveryService:
    def __init__(self, save_prompt: SavePrompt | None = None) -> None:
        self.save_prompt = save_prompt

    def deliver(self, payload: bytes, suggested_name: str) -> DeliveryReceipt:
        if self.save_prompt is not None:
            try:
                target = self.save_prompt.ask_save_path(suggested_name)
            except Exception:
                logger.warning("Save prompt failed, falling back to download", exc_info=True)
                target = None
            if target is not None:
                try:
                    target.write_bytes(payload)
                except OSError:
                    logger.warning(
                        "Could not write %s, falling back to download", target, exc_info=True
                    )
                else:
                    logger.info("Saved merged PDF to %s", target)
                    return DeliveryReceipt(
                        method=DeliveryMethod.SAVED,
                        file_name=target.name,
                        payload=payload,
                        saved_path=target,
                    )

        logger.info("Delivering %s as a browser download", suggested_name)
        return DeliveryReceipt(
            method=DeliveryMethod.DOWNLOAD,
            file_name=suggested_name,
            payload=payload,
        )
