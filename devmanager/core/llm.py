"""OpenAI Chat Completions 的薄封装

密钥取自 OPENAI_API_KEY，模型取自 DEV_MANAGER_LLM_MODEL（默认 gpt-4o-mini）。
提交信息生成与 PR 审阅建议共用此客户端。
"""

from __future__ import annotations

import logging
import os

from devmanager.core.exceptions import ConfigError, DevManagerError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"
API_KEY_ENV = "OPENAI_API_KEY"
MODEL_ENV = "DEV_MANAGER_LLM_MODEL"


class ChatClient:
    """单轮 system + user 对话"""

    def __init__(self, api_key: str = "", model: str = "") -> None:
        self.api_key = api_key or os.getenv(API_KEY_ENV, "")
        self.model = model or os.getenv(MODEL_ENV, DEFAULT_MODEL)
        if not self.api_key:
            raise ConfigError(f"使用 LLM 需要设置 {API_KEY_ENV} 环境变量")

    def complete(
        self, system: str, user: str, *, max_tokens: int, temperature: float = 0.7,
    ) -> str:
        from openai import OpenAI, OpenAIError

        client = OpenAI(api_key=self.api_key)
        logger.info("请求 LLM: model=%s, prompt=%d 字符", self.model, len(user))
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system},
                    {"role": "user", "content": user},
                ],
                max_tokens=max_tokens,
                temperature=temperature,
            )
        except OpenAIError as e:
            raise DevManagerError(f"LLM 调用失败: {e}") from e
        if not resp.choices or not resp.choices[0].message.content:
            raise DevManagerError("LLM 未返回内容")
        return resp.choices[0].message.content.strip()
