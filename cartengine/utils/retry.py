# cartengine/utils/retry.py
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception

from cartengine.exceptions import TransactionFailure
from cartengine.utils import settings


def _is_retryable(exc: BaseException) -> bool:
    # failures during commit are not retried, the commit may have landed
    return isinstance(exc, TransactionFailure) and exc.retryable


def transaction_retry():
    return retry(
        reraise=True,
        stop=stop_after_attempt(settings.TX_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception(_is_retryable),
    )
