"""Provider 包测试 fixtures"""

import pytest


@pytest.fixture
def system_prompt() -> str:
    """包含两轮用户输入的 system prompt"""
    return (
        "Current conversation thread:\n"
        "\n<user_input>\nfirst question\n</user_input>\n"
        "\n"
        "\n<user_input>\nAdd a task to buy milk\n</user_input>\n"
    )


@pytest.fixture
def input_messages(system_prompt) -> list[dict[str, str]]:
    """标准 messages 格式测试数据"""
    return [{"role": "user", "content": system_prompt}]
