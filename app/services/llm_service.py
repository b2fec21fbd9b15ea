"""Roasts, head-to-head verdicts and translations from an OpenAI chat model."""

import json
import logging
from typing import Any

import openai
from pydantic import ValidationError as PydanticValidationError

from app.core.exceptions import ErrorCode, ServiceUnavailableError, UpstreamServiceError
from app.schemas.compare import UserComparison, Verdict
from app.schemas.github import GitHubSignals
from app.schemas.roast import RoastIntensity, RoastResult

logger = logging.getLogger(__name__)

INTENSITY_TONE = {
    RoastIntensity.MILD: "light-hearted and friendly",
    RoastIntensity.MEDIUM: "playfully critical but constructive",
    RoastIntensity.SPICY: "sharp and witty but still respectful",
}

INTENSITY_TEMPERATURE = {
    RoastIntensity.MILD: 0.5,
    RoastIntensity.MEDIUM: 0.7,
    RoastIntensity.SPICY: 0.9,
}

LANGUAGE_NAMES = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ja": "Japanese",
    "ko": "Korean",
    "zh": "Chinese",
    "ru": "Russian",
}

ROAST_SYSTEM_PROMPT = (
    "You are a helpful assistant that analyzes GitHub profiles and provides roasts, "
    "advice, and personality insights. Always respond with valid JSON only."
)
JUDGE_SYSTEM_PROMPT = (
    "You are an expert judge comparing GitHub developers. "
    "Always respond with valid JSON only."
)


def _format_repo(repo) -> str:
    line = (
        f"- {repo.name} ({repo.language or 'No language'}, {repo.stars} stars, "
        f"{repo.forks} forks, updated {repo.updated_at})"
    )
    if repo.description:
        line += f" - {repo.description}"
    if repo.readme_snippet:
        line += f"\n  README snippet: {repo.readme_snippet[:300]}..."
    return line


def build_roast_prompt(signals: GitHubSignals, intensity: RoastIntensity) -> str:
    profile = signals.profile
    profile_lines = [
        f"- Public repos: {profile.public_repos}",
        f"- Followers: {profile.followers}",
        f"- Account created: {profile.created_at}",
    ]
    if profile.bio:
        profile_lines.append(f"- Bio: {profile.bio}")
    if profile.location:
        profile_lines.append(f"- Location: {profile.location}")
    if profile.company:
        profile_lines.append(f"- Company: {profile.company}")
    repo_list = "\n".join(_format_repo(repo) for repo in signals.top_repos)

    return f"""You are analyzing a GitHub developer profile. Generate a {INTENSITY_TONE[intensity]} roast, serious improvement advice, and a developer personality profile.

GitHub Profile Data:
{chr(10).join(profile_lines)}

Top Repositories:
{repo_list}

IMPORTANT CONSTRAINTS:
1. Output MUST be valid JSON only, no markdown formatting, no code blocks.
2. The roast should be tech-focused and avoid guessing personal attributes or doxxing.
3. Advice must reference only observed signals (repos, languages, recency, activity patterns).
4. Keep roast length to 2-4 sentences.
5. Provide 3-7 improvement advice bullets.
6. Personality profile should be based on code patterns, not personal traits.

Output format (JSON only):
{{
  "roast": "string",
  "advice": ["string", "string", ...],
  "profile": {{
    "archetype": "string (e.g., 'The Experimentalist', 'The Maintainer', 'The Specialist', etc.)",
    "strengths": ["string", "string", ...],
    "blind_spots": ["string", "string", ...]
  }}
}}"""


def _describe_contender(label: str, user: UserComparison) -> str:
    top_repos = ", ".join(f"{r.name} ({r.stars} stars)" for r in user.signals.top_repos)
    return f"""{label} ({user.username}):
- Public repos: {user.signals.profile.public_repos}
- Followers: {user.signals.profile.followers}
- Top repos: {top_repos}
- Roast summary: {user.roast.roast}
- Archetype: {user.roast.profile.archetype}"""


def build_compare_prompt(user1: UserComparison, user2: UserComparison, language: str) -> str:
    language_name = "English" if language == "en" else f"the language with ISO code {language}"
    return f"""You are an expert judge comparing two GitHub developers. Analyze both profiles and determine which developer is better based on:
- Code quality and project impact
- Technical skills and diversity
- Community engagement (stars, forks, followers)
- Consistency and activity
- Innovation and creativity

{_describe_contender("User 1", user1)}

{_describe_contender("User 2", user2)}

IMPORTANT:
1. Output MUST be valid JSON only, no markdown formatting, no code blocks.
2. Provide a score from 0-100 for each user.
3. Determine the winner: "user1", "user2", or "tie".
4. Provide detailed reasoning in {language_name}.
5. Be fair and consider multiple factors, not just follower count.

Output format (JSON only):
{{
  "winner": "user1" | "user2" | "tie",
  "reasoning": "string (detailed explanation in the requested language)",
  "score_user1": number (0-100),
  "score_user2": number (0-100)
}}"""


class LLMService:
    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        base_url: str | None = None,
        client: Any | None = None,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self._client = client

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                raise ServiceUnavailableError("OPENAI_API_KEY is not configured")
            self._client = openai.AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and hasattr(self._client, "close"):
            await self._client.close()

    async def _chat(
        self,
        system: str,
        prompt: str,
        temperature: float,
        json_mode: bool = True,
    ) -> str:
        client = self._get_client()
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            "temperature": temperature,
        }
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}

        try:
            response = await client.chat.completions.create(**kwargs)
        except openai.RateLimitError as e:
            raise UpstreamServiceError("OpenAI rate limit exceeded", code=ErrorCode.LLM_ERROR) from e
        except openai.OpenAIError as e:
            logger.warning("OpenAI request failed: %s", e)
            raise UpstreamServiceError(f"OpenAI API error: {e}", code=ErrorCode.LLM_ERROR) from e

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise UpstreamServiceError("Empty response from OpenAI", code=ErrorCode.LLM_ERROR)
        return content.strip()

    @staticmethod
    def _parse_json(content: str) -> dict[str, Any]:
        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise UpstreamServiceError(
                f"OpenAI returned invalid JSON: {e}", code=ErrorCode.LLM_ERROR
            ) from e
        if not isinstance(parsed, dict):
            raise UpstreamServiceError(
                "Invalid response structure from OpenAI", code=ErrorCode.LLM_ERROR
            )
        return parsed

    async def generate_roast(self, signals: GitHubSignals, intensity: RoastIntensity) -> RoastResult:
        intensity = RoastIntensity(intensity)
        content = await self._chat(
            ROAST_SYSTEM_PROMPT,
            build_roast_prompt(signals, intensity),
            temperature=INTENSITY_TEMPERATURE[intensity],
        )
        try:
            return RoastResult.model_validate(self._parse_json(content))
        except PydanticValidationError as e:
            raise UpstreamServiceError(
                "Invalid response structure from OpenAI", code=ErrorCode.LLM_ERROR
            ) from e

    async def compare_users(
        self,
        user1: UserComparison,
        user2: UserComparison,
        language: str = "en",
    ) -> Verdict:
        content = await self._chat(
            JUDGE_SYSTEM_PROMPT,
            build_compare_prompt(user1, user2, language),
            temperature=0.7,
        )
        try:
            return Verdict.model_validate(self._parse_json(content))
        except PydanticValidationError as e:
            raise UpstreamServiceError(
                "Invalid response structure from OpenAI", code=ErrorCode.LLM_ERROR
            ) from e

    async def translate(self, text: str, target_language: str) -> str:
        language_name = LANGUAGE_NAMES.get(target_language, target_language)
        return await self._chat(
            f"You are a professional translator. Translate the given text to {language_name}. "
            "Only return the translated text, nothing else.",
            text,
            temperature=0.3,
            json_mode=False,
        )
