"""Structured-output invocation shared by both label predictors.

A prediction chain is a prompt piped into a chat model constrained to a
pydantic schema. Responses that do not conform to the schema surface as
LabelParseError; any other provider failure surfaces as LabelPredictionError.
"""

from typing import Any, Dict, Type, TypeVar

import structlog
from langchain_core.exceptions import OutputParserException
from langchain_core.language_models import BaseChatModel
from langchain_core.prompts import PromptTemplate
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI
from pydantic import BaseModel, ValidationError

from issue_router.common.config import IssueRouterSettings
from issue_router.common.errors import LabelParseError, LabelPredictionError

logger = structlog.get_logger()

SchemaT = TypeVar("SchemaT", bound=BaseModel)


def create_chat_model(settings: IssueRouterSettings) -> ChatOpenAI:
    """Build the chat model described by the settings.

    Raises:
        ConfigurationError: If the OpenAI API key is missing.
    """
    settings.require("openai_api_key")
    return ChatOpenAI(
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        api_key=settings.openai_api_key,
    )


def build_prediction_chain(
    template: str,
    llm: BaseChatModel,
    schema: Type[BaseModel],
) -> Runnable:
    """Pipe a prompt template into the model's structured output for ``schema``."""
    prompt = PromptTemplate.from_template(template)
    return prompt | llm.with_structured_output(schema)


async def invoke_structured(
    chain: Runnable,
    inputs: Dict[str, Any],
    schema: Type[SchemaT],
) -> SchemaT:
    """Run a prediction chain and return a validated schema instance.

    Args:
        chain: Chain built by ``build_prediction_chain``.
        inputs: Prompt variables.
        schema: The schema the chain is constrained to.

    Returns:
        The parsed response.

    Raises:
        LabelParseError: If the response does not conform to ``schema``.
        LabelPredictionError: If the model invocation itself fails.
    """
    try:
        result = await chain.ainvoke(inputs)
    except (ValidationError, OutputParserException) as e:
        logger.warning("Model response did not match schema", schema=schema.__name__, error=str(e))
        raise LabelParseError(f"Response does not conform to {schema.__name__}: {e}", cause=e) from e
    except Exception as e:
        raise LabelPredictionError(f"LLM invocation failed: {e}", cause=e) from e

    if isinstance(result, schema):
        return result

    if result is None:
        raise LabelParseError(f"Model returned no {schema.__name__} output")

    try:
        if isinstance(result, BaseModel):
            return schema.model_validate(result.model_dump())
        return schema.model_validate(result)
    except ValidationError as e:
        raise LabelParseError(f"Response does not conform to {schema.__name__}: {e}", cause=e) from e
