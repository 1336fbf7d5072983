"""Remote (Gemini) insight producer."""
import json
import re
from typing import Dict, List, Optional

import httpx
from google import genai
from google.genai import errors, types
from pydantic import ValidationError

from spendflow.analysis.models import Insight, Transaction
from spendflow.config.settings import AppSettings
from spendflow.utils.exceptions import ConfigError, LLMError, RetryableLLMError, RetryableNetworkError
from spendflow.utils.logger import get_logger
from spendflow.utils.retry import retry_with_backoff

logger = get_logger()

SYSTEM_INSTRUCTION = (
    "Ты финансовый аналитик банка. Тебе дан список операций: d - описание, a - сумма "
    "(отрицательные - расходы). Сгруппируй их по категориям (например: \"Продукты\", \"Кафе\", "
    "\"Транспорт\", \"Подписки\", \"Коммунальные\", \"Здоровье\", \"Переводы\", \"Другое\"). "
    "Верни строго JSON вида: {\"categories\":[{\"name\":string,\"total\":number,"
    "\"kind\":\"expense\"|\"income\",\"examples\":string[]}],\"habits\":string[]}. "
    "categories - топ-10 по расходам и доходам, examples - не больше 3 описаний. "
    "habits - 5-10 советов, как сократить траты и выработать полезные финансовые привычки."
)


def parse_insight_response(response_text: str) -> Insight:
    """
    Parse and validate the model's JSON answer.

    Raises:
        LLMError: If the text is not JSON or does not match the Insight shape
    """
    cleaned = (response_text or "").strip()
    if cleaned.startswith("```"):
        # Remove markdown code blocks
        lines = cleaned.split("\n")
        cleaned = "\n".join(lines[1:-1]) if len(lines) > 2 else cleaned.strip("`")
        if cleaned.startswith("json"):
            cleaned = cleaned[4:].strip()

    # Remove trailing commas before closing brackets/braces
    cleaned = re.sub(r",\s*([\]}])", r"\1", cleaned)

    # If the model wrapped JSON in text, keep the outermost object
    json_match = re.search(r"\{.*\}", cleaned, re.DOTALL)
    if json_match:
        cleaned = json_match.group(0)

    try:
        data = json.loads(cleaned)
        return Insight.model_validate(data)
    except (json.JSONDecodeError, RecursionError) as e:
        logger.debug(f"Response text: {(response_text or '')[:500]}")
        raise LLMError(f"Invalid JSON response from insight service: {e}")
    except ValidationError as e:
        raise LLMError(f"Insight response does not match expected schema: {e.error_count()} errors")


class RemoteInsightClient:
    """Requests category groups and habits from Gemini."""

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-2.5-flash-lite",
        timeout_seconds: float = 15.0,
        max_transactions: int = 200,
        description_max_length: int = 140,
        temperature: float = 0.3,
        max_retries: int = 1,
        initial_delay: float = 1.0,
        backoff_factor: float = 2.0,
        client=None
    ):
        """
        Initialize the remote insight client.

        Args:
            api_key: Google AI API key
            model_name: Gemini model
            timeout_seconds: Per-request timeout
            max_transactions: Most recent transactions sent per request
            description_max_length: Descriptions are truncated to this length
            temperature: Sampling temperature
            max_retries: Attempts for transient failures (1 disables retrying)
            initial_delay: First retry delay in seconds
            backoff_factor: Retry delay multiplier
            client: Prebuilt genai.Client (tests inject a fake)
        """
        if client is None:
            if not api_key:
                raise ConfigError("Gemini API key is required for remote insights")
            client = genai.Client(
                api_key=api_key,
                http_options=types.HttpOptions(timeout=int(timeout_seconds * 1000))
            )

        self.client = client
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.max_transactions = max_transactions
        self.description_max_length = description_max_length
        self.temperature = temperature
        self.max_retries = max_retries
        self.initial_delay = initial_delay
        self.backoff_factor = backoff_factor

        logger.info(f"Remote insight client initialized with {self.model_name}")

    @classmethod
    def from_settings(cls, api_key: Optional[str], settings: AppSettings, model_name: Optional[str] = None):
        """Build a client from application settings."""
        return cls(
            api_key=api_key,
            model_name=model_name or settings.llm_model_name,
            timeout_seconds=settings.llm_timeout_seconds,
            max_transactions=settings.llm_max_transactions,
            description_max_length=settings.llm_description_max_length,
            temperature=settings.llm_temperature,
            max_retries=settings.retry_max_retries,
            initial_delay=settings.retry_initial_delay_seconds,
            backoff_factor=settings.retry_backoff_factor
        )

    def build_payload(self, transactions: List[Transaction]) -> List[Dict]:
        """Compact {d, a} pairs for the most recent transactions."""
        recent = sorted(transactions, key=lambda txn: txn.date)[-self.max_transactions:]
        return [
            {"d": txn.description[:self.description_max_length], "a": float(txn.amount)}
            for txn in recent
        ]

    def fetch_insight(self, transactions: List[Transaction]) -> Insight:
        """
        Request an insight for transactions.

        Args:
            transactions: Loaded transactions

        Returns:
            Validated Insight

        Raises:
            LLMError: Empty input, error status or malformed answer
            NetworkError: Transport failure or timeout
        """
        payload = self.build_payload(transactions)
        if not payload:
            raise LLMError("no transactions to analyze")

        generate = retry_with_backoff(
            max_retries=self.max_retries,
            initial_delay=self.initial_delay,
            backoff_factor=self.backoff_factor
        )(self._generate)

        insight = parse_insight_response(generate(payload))
        logger.info(
            f"Remote insight for {len(payload)} transactions: "
            f"{len(insight.categories)} categories, {len(insight.habits)} habits"
        )
        return insight

    def _generate(self, payload: List[Dict]) -> str:
        """Single model call, mapping failures onto SpendFlow errors."""
        prompt = f"Операции: {json.dumps(payload, ensure_ascii=False)}"
        config = types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            temperature=self.temperature,
            response_mime_type="application/json"
        )

        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=prompt,
                config=config
            )
        except errors.APIError as e:
            message = f"Insight service returned {e.code}: {e.message}"
            if e.code == 429 or (e.code or 0) >= 500:
                raise RetryableLLMError(message) from e
            raise LLMError(message) from e
        except httpx.TimeoutException as e:
            raise RetryableNetworkError(f"Insight request timed out after {self.timeout_seconds:.0f}s") from e
        except (httpx.HTTPError, OSError) as e:
            raise RetryableNetworkError(f"Insight request failed: {e}") from e

        if not response.text:
            raise LLMError("Insight service returned an empty response")
        return response.text
