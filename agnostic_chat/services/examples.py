"""
The three usage patterns, each written once against ChatBackend and run
unchanged against every registered backend:

1. simple invocation: system + human messages -> invoke()
2. prompt templates: one shared ChatPromptTemplate, formatted per backend -> invoke()
3. streaming: the same kind of messages -> stream(), printed fragment by fragment
"""

import sys
from functools import partial
from typing import Optional, TextIO

from agnostic_chat.providers.base import ChatBackend
from agnostic_chat.schemas.messages import Message
from agnostic_chat.services.harness import BANNER_WIDTH, DispatchHarness
from agnostic_chat.services.prompt import ChatPromptTemplate

EXPERT_PROMPT = ChatPromptTemplate.from_messages(
    [
        ("system", "You are a {role} expert. Provide {style} answers."),
        ("human", "{question}"),
    ]
)

EXPERT_VARIABLES = {
    "role": "Python",
    "style": "clear and practical",
    "question": "How do I use async/await in Python? Keep it under 100 words",
}

TAKEAWAYS = (
    "Same code works with any backend that implements ChatBackend",
    "Switch models by changing the registry only",
    "Type functions against ChatBackend to keep them model-agnostic",
    "Prompt templates and streaming work across all backends",
)


def _out(out: Optional[TextIO]) -> TextIO:
    return out or sys.stdout


async def simple_invocation(backend: ChatBackend, *, out: Optional[TextIO] = None) -> None:
    out = _out(out)
    print("\nEXAMPLE 1: Simple Message Invocation\n", file=out)

    messages = [
        Message.system("You are a helpful assistant that provides concise answers."),
        Message.human("What is the capital of France?"),
    ]
    response = await backend.invoke(messages)
    print(f"Response: {response.content}", file=out)


async def prompt_templates(backend: ChatBackend, *, out: Optional[TextIO] = None) -> None:
    out = _out(out)
    print("\nEXAMPLE 2: Using Prompt Templates\n", file=out)

    messages = backend.format_messages(EXPERT_PROMPT, **EXPERT_VARIABLES)
    response = await backend.invoke(messages)
    print(f"Response: {response.content}", file=out)


async def streaming(backend: ChatBackend, *, out: Optional[TextIO] = None) -> None:
    out = _out(out)
    print("\nEXAMPLE 3: Streaming Responses\n", file=out)

    messages = [
        Message.system("You are a creative writing assistant."),
        Message.human("Write a very short haiku about coding."),
    ]
    print("Streaming response:", file=out)
    out.write("> ")
    out.flush()
    try:
        async for fragment in backend.stream(messages):
            out.write(fragment)
            out.flush()
    finally:
        # end the partial line even when the stream breaks off
        print("\n", file=out)


async def run_examples(harness: DispatchHarness, out: Optional[TextIO] = None) -> None:
    out = _out(out)
    print("\nMODEL-AGNOSTIC CHAT EXAMPLES", file=out)
    print("============================\n", file=out)
    print("This demo shows how the same code works with different models.", file=out)
    names = " and ".join(harness.names) or "no"
    print(f"We will run 3 examples with {names} backends.\n", file=out)

    for example in (simple_invocation, prompt_templates, streaming):
        await harness.run_all(partial(example, out=out))

    print("\n" + "=" * BANNER_WIDTH, file=out)
    print("All examples completed!", file=out)
    print("=" * BANNER_WIDTH + "\n", file=out)

    print("KEY TAKEAWAYS:", file=out)
    for i, line in enumerate(TAKEAWAYS, start=1):
        print(f"   {i}. {line}", file=out)
    print(file=out, flush=True)
