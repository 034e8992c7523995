# services/keyword_responder.py
from __future__ import annotations

import asyncio
from typing import List, NamedTuple, Tuple

from models import ChatResponse


class KeywordRule(NamedTuple):
    keywords: Tuple[str, ...]
    message: str
    quick_replies: List[str]


# ─────────────────────────────────────────────────────────────
# Canned answers, checked top to bottom. First match wins.
# ─────────────────────────────────────────────────────────────
INTERNSHIP_RULE = KeywordRule(
    ("internship", "intern", "program", "future ready"),
    "Our Future Ready Internship Program is designed to bridge Tasmania's ICT skills gap!\n"
    "\n"
    "Key features:\n"
    "• 6-month structured internship placements\n"
    "• Real-world project experience\n"
    "• Professional mentorship and support\n"
    "• Direct pathway to employment\n"
    "• Industry-recognised skill development\n"
    "\n"
    "We work with local businesses to provide meaningful opportunities that benefit "
    "both graduates and employers.",
    ["How to apply?", "Eligibility requirements", "Partner companies", "Success stories"],
)

APPLICATION_RULE = KeywordRule(
    ("apply", "application", "how to", "join", "enroll"),
    "Ready to start your journey? Here's how to apply:\n"
    "\n"
    "1. **Check Eligibility**: Recent ICT graduate or final-year student\n"
    "2. **Submit Application**: Complete our online application form\n"
    "3. **Skills Assessment**: We'll evaluate your technical background\n"
    "4. **Interview Process**: Meet with our team and potential employers\n"
    "5. **Placement Matching**: We'll match you with the perfect opportunity\n"
    "\n"
    "The process typically takes 2-3 weeks from application to placement confirmation.",
    ["View application form", "Eligibility details", "What documents needed?", "Timeline questions"],
)

CAREER_RULE = KeywordRule(
    ("career", "services", "support", "help", "guidance"),
    "We provide comprehensive career support throughout your journey:\n"
    "\n"
    "**Our Services Include:**\n"
    "• Resume and portfolio development\n"
    "• Interview preparation and practice\n"
    "• Professional networking opportunities\n"
    "• Skill gap analysis and training recommendations\n"
    "• Industry insights and market trends\n"
    "• Ongoing mentorship during placements\n"
    "\n"
    "Our goal is to ensure you're not just job-ready, but career-ready for long-term "
    "success in the ICT industry.",
    ["Resume help", "Interview prep", "Networking events", "Skill development"],
)

PARTNERSHIP_RULE = KeywordRule(
    ("partner", "partnership", "business", "company", "employer"),
    "We collaborate with leading Tasmanian businesses to create win-win partnerships:\n"
    "\n"
    "**For Employers:**\n"
    "• Access to skilled, motivated graduates\n"
    "• Reduced recruitment costs and time\n"
    "• Fresh perspectives and innovative thinking\n"
    "• Government incentives and support\n"
    "• Flexible engagement models\n"
    "\n"
    "**Current Partners Include:**\n"
    "• Technology companies\n"
    "• Government agencies\n"
    "• Healthcare organisations\n"
    "• Financial services\n"
    "• Manufacturing and logistics\n"
    "\n"
    "Interested in partnering with us?",
    ["Partnership benefits", "How to partner", "Current partners", "Success stories"],
)

CONTACT_RULE = KeywordRule(
    ("contact", "phone", "email", "address", "location", "office"),
    "Get in touch with us! We're here to help:\n"
    "\n"
    "**Contact Information:**\n"
    "• Website: skillssolutionsaustralia.com\n"
    "• General Enquiries: Hello@skillssolitionsaustralia.com.au\n"
    "• Director: Julia Lane - Julia.lane@skillssolutionsaustralia.com.au\n"
    "• Phone: 0414 670 863\n"
    "\n"
    "**Location:**\n"
    "Based in Tasmania, serving the entire state's ICT community with a focus on "
    "regional development and opportunities.\n"
    "\n"
    "We typically respond to inquiries within 24 hours during business days.",
    ["Visit contact page", "Schedule a call", "Email us", "Find office location"],
)

# "contact", "help" and "support" are already taken by earlier rules,
# so only "try again" ever lands here.
SPEAK_TO_SOMEONE_RULE = KeywordRule(
    ("try again", "contact", "help", "support"),
    "I'm your AI Assistant, and I understand you'd like to speak with someone directly. "
    "Here are your options:\n"
    "\n"
    "• Visit our contact page for direct communication\n"
    "• Schedule a consultation call\n"
    "• Email us your specific questions\n"
    "• Browse our website for detailed information\n"
    "\n"
    "Our team is ready to provide personalised assistance for your needs.",
    ["Contact page", "Schedule call", "Email us", "Browse website"],
)

DEFAULT_RULE = KeywordRule(
    (),
    "Hello! I'm your AI Assistant for Skills Solutions Australia.\n"
    "\n"
    "I specialise in helping you learn about our programs and services. We focus on "
    "empowering ICT graduates through our Future Ready Internship Program, providing the "
    "bridge between education and meaningful employment in Tasmania's growing tech sector.\n"
    "\n"
    "What would you like to know more about?",
    ["Internship programs", "How to apply", "Career services", "Partnership opportunities"],
)

RULES: List[KeywordRule] = [
    INTERNSHIP_RULE,
    APPLICATION_RULE,
    CAREER_RULE,
    PARTNERSHIP_RULE,
    CONTACT_RULE,
    SPEAK_TO_SOMEONE_RULE,
]


def match_rule(message: str) -> KeywordRule:
    text = (message or "").lower().strip()
    for rule in RULES:
        if any(keyword in text for keyword in rule.keywords):
            return rule
    return DEFAULT_RULE


class KeywordResponder:
    """Answers chat messages from the canned rule list, no external calls."""

    def __init__(self, delay: float = 0.0):
        self.delay = delay

    async def respond(self, message: str) -> ChatResponse:
        rule = match_rule(message)
        if self.delay > 0:
            # simulated typing time
            await asyncio.sleep(self.delay)
        return ChatResponse(message=rule.message, quickReplies=list(rule.quick_replies), isAI=False)
