"""
AWS Bedrock client for Claude text and vision calls
"""
import asyncio
import json
import logging
from typing import List, Dict, Any, Optional

import boto3
from botocore.exceptions import ClientError

from ..config.settings import settings

logger = logging.getLogger(__name__)


class BedrockService:
    """Thin wrapper around bedrock-runtime invoke_model (Anthropic messages format)"""

    def __init__(self, model_id: Optional[str] = None):
        self.model_id = model_id or settings.BEDROCK_MODEL_ID
        self.max_tokens = settings.BEDROCK_MAX_TOKENS
        self.temperature = settings.BEDROCK_TEMPERATURE
        self._client = None

    @property
    def bedrock_runtime(self):
        # Created on first use so importing services needs no AWS credentials
        if self._client is None:
            self._client = boto3.client(
                'bedrock-runtime',
                aws_access_key_id=settings.AWS_ACCESS_KEY_ID or None,
                aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY or None,
                region_name=settings.AWS_REGION
            )
        return self._client

    def _invoke(self, request_body: Dict[str, Any]) -> Dict[str, Any]:
        response = self.bedrock_runtime.invoke_model(
            modelId=self.model_id,
            contentType="application/json",
            accept="application/json",
            body=json.dumps(request_body)
        )
        return json.loads(response['body'].read())

    async def generate(
        self,
        messages: List[Dict[str, Any]],
        system_prompt: str = "",
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> str:
        """
        Generate a complete (non-streaming) response

        Args:
            messages: Anthropic-format message list (role, content)
            system_prompt: System prompt for context
            max_tokens: Override for the configured max tokens

        Returns:
            Concatenated text of the response content blocks
        """
        request_body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": max_tokens or self.max_tokens,
            "temperature": self.temperature if temperature is None else temperature,
            "messages": messages
        }
        if system_prompt:
            request_body["system"] = system_prompt

        try:
            response_body = await asyncio.to_thread(self._invoke, request_body)
        except ClientError as e:
            logger.error(f"❌ Bedrock request failed: {e.response.get('Error', {}).get('Code')} {str(e)}")
            raise

        content = ""
        for content_block in response_body.get('content', []):
            if content_block.get('type') == 'text':
                content += content_block.get('text', '')

        usage = response_body.get('usage', {})
        logger.info(
            f"✅ Bedrock response: {len(content)} chars, "
            f"{usage.get('input_tokens', 0)} in / {usage.get('output_tokens', 0)} out tokens"
        )
        return content
