"""Shared behaviour for AI providers that call a remote HTTP API."""

import json
import re
from abc import abstractmethod
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

import requests
from pydantic import ValidationError

from ..models.assistant import AssistantSuggestion, UserProfile
from ..models.company import CompanyInsight
from ..models.interview import InterviewQuestion, ResponseFeedback
from ..models.resume import ResumeAnalysis
from ..services import heuristics
from ..services.llm_manager import AIProvider
from ..utils.exceptions import AuthenticationError, LLMProviderError, NetworkError, RateLimitError

USER_AGENT = "CareerCoach/1.0.0"
DEFAULT_TIMEOUT = 30
DEFAULT_MAX_TOKENS = 1024
DEFAULT_TEMPERATURE = 0.7

MIN_QUESTIONS = 3
MAX_QUESTIONS = 10

_FENCE_PATTERN = re.compile(r"```(?:json|JSON)?\s*(.*?)```", re.DOTALL)

Prompt = Tuple[str, Optional[str]]


def extract_json(text: str) -> Optional[Union[Dict[str, Any], List[Any]]]:
    """Decode the JSON payload embedded in model output.

    Markdown code fences are stripped. If the remaining text is not JSON as a
    whole, the first balanced ``{...}`` object is decoded instead.

    Returns:
        The decoded object or list, or None when nothing decodes.
    """
    if not isinstance(text, str) or not text:
        return None

    text = text.strip()
    fenced = _FENCE_PATTERN.search(text)
    if fenced:
        text = fenced.group(1).strip()

    try:
        data = json.loads(text)
        if isinstance(data, (dict, list)):
            return data
    except ValueError:
        pass

    decoder = json.JSONDecoder()
    start = text.find("{")
    while start != -1:
        try:
            data, _ = decoder.raw_decode(text, start)
            if isinstance(data, dict):
                return data
        except ValueError:
            pass
        start = text.find("{", start + 1)
    return None


def dig(data: Any, *path: Union[str, int]) -> Any:
    """Follow keys and list indexes into a decoded response body.

    Returns None as soon as a step does not match the shape of ``data``.
    """
    for step in path:
        if isinstance(step, int) and isinstance(data, list) and -len(data) <= step < len(data):
            data = data[step]
        elif isinstance(step, str) and isinstance(data, dict):
            data = data.get(step)
        else:
            return None
    return data


def join_text(blocks: Any, kind: Optional[str] = None) -> str:
    """Concatenate the string ``text`` fields of a list of content blocks."""
    if not isinstance(blocks, list):
        return ""
    return "".join(
        block["text"]
        for block in blocks
        if isinstance(block, dict)
        and isinstance(block.get("text"), str)
        and (kind is None or block.get("type") == kind)
    )


def normalize_questions(raw_questions: Any) -> List[InterviewQuestion]:
    """Turn model-provided questions into at most ten with unique ids.

    Missing or duplicate ids are rewritten to ``q{n}``; entries without text
    are dropped.
    """
    if isinstance(raw_questions, dict):
        raw_questions = raw_questions.get("questions")
    if not isinstance(raw_questions, list):
        return []

    questions: List[InterviewQuestion] = []
    seen_ids = set()
    for item in raw_questions:
        if len(questions) >= MAX_QUESTIONS:
            break
        if isinstance(item, str):
            item = {"text": item}
        if not isinstance(item, dict):
            continue

        candidate = dict(item)
        question_id = str(candidate.get("id") or "").strip()
        if not question_id or question_id in seen_ids:
            number = len(questions) + 1
            while f"q{number}" in seen_ids:
                number += 1
            question_id = f"q{number}"
        candidate["id"] = question_id

        try:
            question = InterviewQuestion.model_validate(candidate)
        except ValidationError:
            continue
        seen_ids.add(question.id)
        questions.append(question)
    return questions


class RemoteAIProvider(AIProvider):
    """Base class for providers backed by an HTTP text-generation API.

    Subclasses supply ``_headers`` and ``_complete``. Every operation builds a
    prompt, asks the backend for text, decodes and validates the JSON inside
    it, and falls back to the heuristics when the output is unusable.

    Transport failures (network, authentication, rate limiting, error status)
    raise ``LLMProviderError`` subclasses when ``propagate_errors`` is set, so a
    registry can move on to the next provider. Otherwise they are logged and
    absorbed into heuristic output.
    """

    name = "remote"
    default_base_url = ""
    default_model = ""
    default_max_tokens = DEFAULT_MAX_TOKENS
    default_temperature = DEFAULT_TEMPERATURE

    def __init__(self, api_key: Optional[str], settings: Optional[Dict[str, Any]] = None, propagate_errors: bool = False):
        settings = {k: v for k, v in (settings or {}).items() if k != "api_key" and v is not None}
        super().__init__(settings)
        self.api_key = api_key
        self.base_url = (settings.get("base_url") or self.default_base_url).rstrip("/")
        self.model = settings.get("model") or self.default_model
        self.timeout = settings.get("timeout", DEFAULT_TIMEOUT)
        self.max_tokens = settings.get("max_tokens", self.default_max_tokens)
        self.temperature = settings.get("temperature", self.default_temperature)
        self.propagate_errors = propagate_errors

    @abstractmethod
    def _headers(self) -> Dict[str, str]:
        """Authentication headers for the backend."""

    @abstractmethod
    def _complete(self, prompt: str, system: Optional[str] = None) -> str:
        """Send one prompt and return the generated text."""

    def _make_request(self, url: str, payload: Dict[str, Any]) -> Any:
        """POST ``payload`` to ``url`` and return the decoded JSON body.

        A fresh session is opened and closed for every call.

        Raises:
            NetworkError: On connection failures and timeouts
            AuthenticationError: On HTTP 401 and 403
            RateLimitError: On HTTP 429
            LLMProviderError: On any other non-2xx status
        """
        session = requests.Session()
        session.headers.update({
            "Content-Type": "application/json",
            "User-Agent": USER_AGENT,
        })
        session.headers.update(self._headers())

        try:
            response = session.post(url, json=payload, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"{self.name} request failed: {e}", provider_name=self.name, url=url)
        finally:
            session.close()

        if response.status_code in (401, 403):
            raise AuthenticationError(f"Invalid {self.name} API key", provider_name=self.name)
        elif response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                f"{self.name} rate limit exceeded",
                provider_name=self.name,
                retry_after=int(retry_after) if retry_after and retry_after.isdigit() else None,
            )
        elif not 200 <= response.status_code < 300:
            raise LLMProviderError(
                f"{self.name} API returned status {response.status_code}",
                provider_name=self.name,
                details={"status_code": response.status_code},
            )

        try:
            return response.json()
        except ValueError:
            self.logger.warning(f"{self.name} returned a non-JSON response body")
            return {}

    def _generate_json(self, operation_name: str, prompt: Prompt) -> Optional[Union[Dict[str, Any], List[Any]]]:
        """Run a prompt and decode its JSON, or None when the result is unusable."""
        text, system = prompt
        try:
            output = self._complete(text, system=system)
        except LLMProviderError as e:
            if self.propagate_errors:
                raise
            self.logger.warning(f"{self.name} {operation_name} failed, using heuristics: {e}")
            return None

        if not isinstance(output, str):
            output = ""
        data = extract_json(output)
        if data is None:
            self.logger.warning(f"{self.name} returned no JSON for {operation_name}, using heuristics")
            self.logger.debug(f"Unparseable {self.name} output: {(output or '')[:200]!r}")
        return data

    def _invalid_output(self, operation_name: str, error: Exception) -> None:
        self.logger.warning(f"{self.name} output for {operation_name} failed validation, using heuristics: {error}")

    # Prompts. Each returns (user prompt, optional system prompt).

    def _build_resume_prompt(self, content: str) -> Prompt:
        prompt = f"""Analyze this resume and extract information in JSON format:

Resume: {content}

Please provide a JSON response with:
- skills: array of technical and soft skills mentioned
- experience: brief summary of work experience
- achievements: array of key accomplishments

Format: {{"skills": ["skill1", "skill2"], "experience": "summary", "achievements": ["achievement1"]}}"""
        return prompt, None

    def _build_company_prompt(self, company_name: str, position: str) -> Prompt:
        prompt = f"""Research {company_name} for the position of {position}. Provide insights about company culture, mission, recent developments, and key skills required for this role.

Return JSON format: {{"culture": "...", "mission": "...", "recentNews": "...", "requiredSkills": ["skill1", "skill2"]}}"""
        return prompt, None

    def _build_questions_prompt(self, company_name: str, position: str, skills: Sequence[str], experience: str) -> Prompt:
        prompt = f"""Generate 10 interview questions for:
Company: {company_name}
Position: {position}
Candidate Skills: {', '.join(skills) if skills else heuristics.DEFAULT_SKILL_PLACEHOLDER}
Experience: {experience or 'Not specified'}

Return JSON: {{"questions": [{{"id": "q1", "text": "...", "type": "behavioral|technical|situational|motivational|closing", "difficulty": "easy|medium|hard"}}]}}"""
        return prompt, None

    def _build_evaluation_prompt(self, question: str, response: str) -> Prompt:
        prompt = f"""Evaluate this interview response:
Question: {question}
Response: {response}

Return JSON: {{"score": 1-10, "strengths": ["strength1"], "improvements": ["improvement1"], "suggestion": "overall suggestion"}}"""
        return prompt, None

    def _build_suggestions_prompt(self, context: str, conversation: str, profile: UserProfile) -> Prompt:
        prompt = f"""Provide real-time interview assistance:
Context: {context}
Recent Conversation: {conversation}
User Profile: {json.dumps(profile.model_dump())}

Return JSON: {{"keyPoints": ["point1"], "followUpSuggestions": ["suggestion1"], "communicationTips": ["tip1"], "relevantAchievements": ["achievement1"]}}"""
        return prompt, None

    def analyze_resume(self, content: str) -> ResumeAnalysis:
        data = self._generate_json("analyze_resume", self._build_resume_prompt(content))
        if isinstance(data, dict):
            try:
                analysis = ResumeAnalysis.model_validate(data)
            except ValidationError as e:
                self._invalid_output("analyze_resume", e)
            else:
                if not analysis.experience:
                    analysis = analysis.model_copy(update={"experience": heuristics.DEFAULT_EXPERIENCE_SUMMARY})
                return analysis
        return heuristics.analyze_resume(content)

    def research_company(self, company_name: str, position: str) -> CompanyInsight:
        data = self._generate_json("research_company", self._build_company_prompt(company_name, position))
        if isinstance(data, dict):
            try:
                return heuristics.complete_company_insight(company_name, position, data)
            except ValidationError as e:
                self._invalid_output("research_company", e)
        return heuristics.research_company(company_name, position)

    def generate_interview_questions(
        self,
        company_name: str,
        position: str,
        skills: Sequence[str],
        experience: str,
    ) -> List[InterviewQuestion]:
        skills = list(skills or [])
        data = self._generate_json(
            "generate_interview_questions",
            self._build_questions_prompt(company_name, position, skills, experience),
        )
        if data is not None:
            questions = normalize_questions(data)
            if len(questions) >= MIN_QUESTIONS:
                return questions
            self.logger.warning(f"{self.name} produced {len(questions)} usable questions, using heuristics")
        return heuristics.default_questions(company_name, position, skills)

    def evaluate_response(self, question: str, response: str) -> ResponseFeedback:
        data = self._generate_json("evaluate_response", self._build_evaluation_prompt(question, response))
        if isinstance(data, dict) and "score" in data:
            try:
                return ResponseFeedback.model_validate(data)
            except ValidationError as e:
                self._invalid_output("evaluate_response", e)
        return heuristics.evaluate_response(question, response)

    def generate_suggestions(
        self,
        context: str,
        conversation: str,
        user_profile: Optional[Union[UserProfile, Dict[str, Any]]] = None,
    ) -> AssistantSuggestion:
        profile = UserProfile.coerce(user_profile)
        data = self._generate_json(
            "generate_suggestions",
            self._build_suggestions_prompt(context, conversation, profile),
        )
        if isinstance(data, dict):
            try:
                suggestion = AssistantSuggestion.model_validate(data)
            except ValidationError as e:
                self._invalid_output("generate_suggestions", e)
            else:
                if suggestion.key_points or suggestion.follow_up_suggestions or suggestion.communication_tips:
                    return suggestion
        return heuristics.generate_suggestions(context, conversation, profile)

    def get_provider_info(self) -> Dict[str, Any]:
        """Get provider information."""
        return {
            "name": self.name,
            "model": self.model,
            "base_url": self.base_url,
            "timeout": self.timeout,
            "propagate_errors": self.propagate_errors,
        }
