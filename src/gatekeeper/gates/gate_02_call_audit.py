"""GATE 2: Аудит операций batch, предложенного executor

Для каждой операции по порядку:
- target должен быть в whitelist адаптеров (иначе INVALID_CALL_TARGET)
- selector должен быть в таблице форм для категории target
  (иначе INVALID_CALL_METHOD), payload декодируется строго
- из вызова извлекается токен, баланс которого операция уменьшает

Токены, отличные от token_in, собираются в список side assets
(без дубликатов, в порядке первого появления). Для них GATE 3 построит
assertion "баланс не уменьшился".

Withdraw через universal адаптер разрешён: это bounty executor из
surplus. Безопасность обеспечивает только end-to-end invariant GATE 3.

Аудит read-only: ничего не исполняется и не мутируется.
"""

import logging
from dataclasses import dataclass
from typing import Sequence

from src.core.calls.call_shapes import DecodedCall, decode_call
from src.core.calls.whitelist import AdapterWhitelist
from src.core.domain.errors import InvalidCallTarget
from src.core.domain.operation import Operation


logger = logging.getLogger(__name__)


# =============================================================================
# RESULT
# =============================================================================


@dataclass(frozen=True)
class Gate02Result:
    """Результат GATE 2."""

    side_tokens: tuple[str, ...]
    decoded_calls: tuple[DecodedCall, ...]
    details: str


# =============================================================================
# GATE 2
# =============================================================================


class Gate02CallAudit:
    """GATE 2: классификация и аудит операций."""

    def __init__(self, whitelist: AdapterWhitelist):
        self.whitelist = whitelist

    def evaluate(self, calls: Sequence[Operation], token_in: str) -> Gate02Result:
        """Аудит batch.

        Args:
            calls: операции executor (без invariant операции)
            token_in: продаваемый токен ордера

        Returns:
            Gate02Result со списком side assets

        Raises:
            InvalidCallTarget: target не в whitelist
            InvalidCallMethod: selector не распознан / payload некорректен
        """
        side_tokens: list[str] = []
        decoded_calls: list[DecodedCall] = []

        for index, call in enumerate(calls):
            adapter = self.whitelist.kind_of(call.target)
            if adapter is None:
                raise InvalidCallTarget(target=call.target, index=index)

            decoded = decode_call(adapter, call.call_data, index=index)
            decoded_calls.append(decoded)

            spent = decoded.spent_token
            if spent != token_in and spent not in side_tokens:
                side_tokens.append(spent)

        logger.debug("gate02 pass: %d calls, side tokens=%s", len(decoded_calls), side_tokens)
        return Gate02Result(
            side_tokens=tuple(side_tokens),
            decoded_calls=tuple(decoded_calls),
            details=f"Audited {len(decoded_calls)} calls, {len(side_tokens)} side tokens",
        )
