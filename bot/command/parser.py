"""
채팅 명령 파서

"/save@allinvoo_bot 12.5 점심" → BotCommand(name="save", args="12.5 점심")
"""

from dataclasses import dataclass


# 지원 명령 목록 (소문자)
COMMANDS: tuple[str, ...] = ("start", "help", "save", "adjust", "allinvoo", "query")


@dataclass(frozen=True)
class BotCommand:
    """파싱된 명령

    Attributes:
        name: 명령 이름 (소문자, "/" 제외)
        args: 명령 뒤 나머지 텍스트 (앞뒤 공백 제거)
    """

    name: str
    args: str = ""


def parse_command(text: str, bot_username: str | None = None) -> BotCommand | None:
    """메시지 텍스트에서 명령 추출

    Args:
        text: 메시지 본문
        bot_username: 봇 username ("/cmd@다른봇" 형태를 걸러내는 데 사용)

    Returns:
        BotCommand (명령이 아니거나 모르는 명령, 다른 봇 대상이면 None)
    """
    s = text.strip()
    if not s.startswith("/"):
        return None

    parts = s[1:].split(maxsplit=1)
    if not parts:
        return None

    head = parts[0]
    args = parts[1].strip() if len(parts) > 1 else ""

    name, _, target = head.partition("@")
    if target and bot_username and target.lower() != bot_username.lower():
        return None

    name = name.lower()
    if name not in COMMANDS:
        return None

    return BotCommand(name=name, args=args)
