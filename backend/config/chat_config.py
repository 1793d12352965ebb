"""
Chat Configuration

Settings for the "debate your AI" coach backed by Google Gemini.
"""

import os

from dotenv import load_dotenv

load_dotenv()

GEMINI_API_KEY = os.getenv('GEMINI_API_KEY', '')
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-1.5-flash')

DEBATE_SYSTEM_PROMPT = """
You are a stock AI coach. The user will argue with you about whether to buy/sell a stock.
Your style:
- Challenge them with 2-3 logical reasons.
- If their argument is strong, concede and say "You might be right, here's a safer approach."
- Keep responses concise (2-3 sentences max).
- Be conversational and slightly confrontational but helpful.
"""

FALLBACK_REPLY = "I'm having trouble processing your question right now. Please try again."

MAX_QUESTION_LENGTH = int(os.getenv('MAX_QUESTION_LENGTH', '2000'))
