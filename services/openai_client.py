import logging
from typing import Dict, List, Optional, Sequence

from openai import AsyncOpenAI

from errors import ConfigurationError
from models import ChatMessage, ChatResponse
from settings import Settings

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 10

SYSTEM_PROMPT = """You are an AI Assistant for Skills Solutions Australia, Tasmania's leading ICT career development organisation.

ABOUT SKILLS SOLUTIONS AUSTRALIA:
- We bridge Tasmania's ICT skills gap through practical internship programs
- Based in Tasmania, serving the entire state's tech community
- Winner of TAS ICT 2022 Award for Development of ICT Employment Opportunities
- Study TAS Industry Partner of the Year 2022 & 2023

OUR SERVICES:
• Future Ready Internship Program (6-month structured placements)
• Comprehensive career services (resume writing, interview prep, career guidance)
• Professional networking opportunities
• Skills assessment and development
• Employer partnership programs

KEY PROGRAMS:
1. Future Ready Internship Program:
   - 6-month structured internship placements
   - Real-world project experience with industry partners
   - Professional mentorship and career support
   - Technology companies, government agencies, healthcare, financial services partners

2. Career Services:
   - Professional resume writing and optimisation
   - Cover letter creation and customization
   - Interview preparation and mock sessions
   - Career guidance and pathway planning
   - Professional networking facilitation

WEBSITE: skillssolutionsaustralia.com
LOCATION: Tasmania, Australia

PERSONALITY: Be helpful, professional, enthusiastic about career development, knowledgeable about ICT industry trends, and always encouraging. Keep responses conversational but informative. If asked about specific details not in your knowledge base, direct users to contact the team or visit the website for the most current information.

Always respond as an AI Assistant and maintain a friendly, professional tone that reflects the company's mission to empower ICT graduates for workforce success."""

FALLBACK_MESSAGE = (
    "I'm experiencing technical difficulties right now. Please try again in a moment, "
    "or contact our team directly for immediate assistance at skillssolutionsaustralia.com"
)
FALLBACK_QUICK_REPLIES = ["Try again", "Contact us", "Visit website"]


def build_client(settings: Settings) -> AsyncOpenAI:
    if not settings.OPENAI_API_KEY:
        raise ConfigurationError("OPENAI_API_KEY not set")
    return AsyncOpenAI(api_key=settings.OPENAI_API_KEY, timeout=settings.OPENAI_TIMEOUT)


def build_messages(message: str,
                   history: Optional[Sequence[ChatMessage]] = None,
                   system_prompt: str = SYSTEM_PROMPT) -> List[Dict[str, str]]:
    msg_stack = [{"role": "system", "content": system_prompt}]
    for m in list(history or [])[-HISTORY_LIMIT:]:
        role = (m.role or "").lower()
        if role in ("user", "assistant"):
            msg_stack.append({"role": role, "content": m.content})
    msg_stack.append({"role": "user", "content": message})
    return msg_stack


def suggest_quick_replies(message: str) -> List[str]:
    text = (message or "").lower()
    if "internship" in text or "program" in text:
        return ["How to apply", "Eligibility requirements", "Program benefits", "Success stories"]
    if "resume" in text or "cv" in text or "career" in text:
        return ["Resume tips", "Interview prep", "Career guidance", "Pricing info"]
    if "contact" in text or "apply" in text:
        return ["Contact us", "Application form", "Schedule call", "Visit website"]
    if "employer" in text or "partnership" in text:
        return ["Partnership benefits", "How to partner", "Success stories", "Contact team"]
    return ["Tell me more", "How to get started", "Contact us", "Visit website"]


async def chat_completion(client: AsyncOpenAI, messages: List[Dict[str, str]], model: str) -> str:
    resp = await client.chat.completions.create(
        model=model,
        messages=messages,
        max_tokens=500,
        temperature=0.7,
        frequency_penalty=0.1,
        presence_penalty=0.1,
    )
    content = (resp.choices[0].message.content or "").strip()
    if not content:
        raise ValueError("OpenAI returned an empty completion")
    return content


class AIResponder:
    def __init__(self, settings: Settings, client: Optional[AsyncOpenAI] = None):
        self.client = client or build_client(settings)
        self.model = settings.MODEL_NAME

    async def respond(self, message: str, history: Optional[Sequence[ChatMessage]] = None) -> ChatResponse:
        """
        Never raises: any OpenAI or parsing problem turns into the scripted
        apology with isAI=False.
        """
        try:
            text = await chat_completion(self.client, build_messages(message, history), self.model)
        except Exception:
            logger.exception("[OPENAI] chat completion failed")
            return ChatResponse(message=FALLBACK_MESSAGE, quickReplies=list(FALLBACK_QUICK_REPLIES), isAI=False)

        return ChatResponse(message=text, quickReplies=suggest_quick_replies(message), isAI=True)
