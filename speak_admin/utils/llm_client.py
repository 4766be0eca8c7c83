import asyncio
import json
import logging
import re
import time
from typing import Any, Dict, List, Optional

import openai
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from speak_admin.config.settings import settings

logger = logging.getLogger(__name__)

_JSON_FENCE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


class LLMResponseError(Exception):
    """大模型返回内容无法解析"""
    pass


def parse_json_content(content: str) -> Any:
    """解析模型返回的JSON，兼容 ```json 代码块包裹"""
    text = _JSON_FENCE.sub("", (content or "").strip())
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise LLMResponseError(f"模型返回的不是合法JSON: {e}") from e


class LLMClient:
    """大模型客户端，封装兼容OpenAI接口的调用"""

    def __init__(self):
        self.api_key = settings.LLM_API_KEY
        self.model = settings.LLM_MODEL
        self.base_url = settings.LLM_API_BASE
        self.max_tokens = settings.LLM_MAX_TOKENS
        self.timeout = settings.LLM_TIMEOUT

        self.client = openai.OpenAI(
            api_key=self.api_key,
            base_url=self.base_url,
            timeout=self.timeout
        )

        logger.info(f"LLM客户端初始化完成，模型: {self.model}")

    @retry(
        retry=retry_if_exception_type((openai.APITimeoutError, openai.APIConnectionError)),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=4, max=10),
        reraise=True,
    )
    async def generate_response(self, messages: List[Dict[str, str]],
                                temperature: float = 0.7,
                                max_tokens: Optional[int] = None) -> str:
        """
        调用大模型生成响应

        Args:
            messages: 消息列表，格式为 [{"role": "user", "content": "你好"}]
            temperature: 生成温度
            max_tokens: 最大token数

        Returns:
            str: 模型生成的响应内容
        """
        logger.debug(f"调用LLM，消息数: {len(messages)}, 温度: {temperature}, 最大token数: {max_tokens or self.max_tokens}")

        try:
            start_time = time.time()
            loop = asyncio.get_running_loop()
            response = await loop.run_in_executor(
                None,
                lambda: self.client.chat.completions.create(
                    model=self.model,
                    messages=messages,
                    temperature=temperature,
                    max_tokens=max_tokens or self.max_tokens,
                    stream=False
                )
            )

            content = response.choices[0].message.content or ""
            usage = response.usage

            elapsed_time = time.time() - start_time
            logger.debug(f"LLM调用成功: {len(content)}字符, "
                         f"耗时: {elapsed_time:.2f}s, "
                         f"Token使用: {usage.total_tokens if usage else 'N/A'}")
            return content

        except openai.APITimeoutError as e:
            logger.error(f"LLM调用超时: {e}")
            raise
        except openai.APIError as e:
            logger.error(f"LLM API错误: {e}")
            raise

    async def generate_json(self, system_prompt: str, user_input: str,
                            temperature: float = 0.7) -> Any:
        """生成并解析JSON结构的响应"""
        messages = [
            {"role": "system", "content": system_prompt},
            {"role": "user", "content": user_input},
        ]
        content = await self.generate_response(messages, temperature=temperature)
        return parse_json_content(content)


class MockLLMClient(LLMClient):
    """模拟LLM客户端，未配置API Key时用于开发和测试"""

    def __init__(self):
        self.model = "mock"
        logger.info("使用模拟LLM客户端")

    async def generate_response(self, messages: List[Dict[str, str]],
                                temperature: float = 0.7,
                                max_tokens: Optional[int] = None) -> str:
        """根据请求中的brief返回固定结构的草稿"""
        brief = json.loads(messages[-1]["content"]) if messages else {}
        kind = brief.get("draft_type")
        subject = brief.get("subject") or "日常交流"
        difficulty = brief.get("difficulty") or "HSK1"

        if kind == "topic":
            draft = {
                "name": f"{subject}",
                "short_description": f"{difficulty} 水平的「{subject}」口语话题",
                "long_description": f"围绕「{subject}」的真实场景练习常用词汇和表达，适合 {difficulty} 水平的学员。",
            }
        elif kind == "lesson":
            draft = {
                "title": f"{subject} 入门",
                "description": f"{difficulty} 水平的「{subject}」口语课程",
                "level": difficulty,
            }
        else:
            kinds = brief.get("question_kinds") or ["mcq"]
            draft = {
                "questions": [
                    {
                        "position": i + 1,
                        "prompt": f"第 {i + 1} 题：用中文描述「{subject}」",
                        "simplified_text": subject,
                        "traditional_text": subject,
                        "phonetic": "",
                        "exam": brief.get("exam") or "OTHER",
                        "kind": kinds[i % len(kinds)],
                        "explanation": f"练习「{subject}」相关的 {difficulty} 词汇。",
                    }
                    for i in range(int(brief.get("question_count") or 1))
                ]
            }
        return json.dumps(draft, ensure_ascii=False)


def create_llm_client(use_mock: bool = False) -> LLMClient:
    """创建LLM客户端实例"""
    if use_mock or not settings.LLM_API_KEY:
        logger.info("使用模拟LLM客户端（开发模式）")
        return MockLLMClient()
    return LLMClient()
