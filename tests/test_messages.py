"""Test templates.messages"""

# pyright: basic

import json
import unittest

from pydantic import ValidationError

from lmprompt.templates.messages import (
    ContentMessage,
    PromptRole,
    ToolCallMessage,
    ToolResult,
)
from lmprompt.templates.tools import ToolCall


class TestContentMessage(unittest.TestCase):

    def test_user_message_record(self):
        msg = ContentMessage(role=PromptRole.USER, content="hi")
        self.assertEqual(msg.to_map(), {'role': "user", 'content': "hi"})
        self.assertNotIn('tool_calls', msg.to_map())

    def test_roles_lowercase(self):
        for role in (
            PromptRole.SYSTEM,
            PromptRole.USER,
            PromptRole.ASSISTANT,
            PromptRole.TOOL,
        ):
            msg = ContentMessage(role=role, content="text")
            self.assertEqual(msg.to_map()['role'], role.name.lower())

    def test_structured_content(self):
        payload = {'temperature': 21, 'unit': "C"}
        msg = ContentMessage(role=PromptRole.TOOL, content=payload)
        self.assertEqual(msg.to_map()['content'], payload)

    def test_none_content_rejected(self):
        with self.assertRaises(ValidationError):
            ContentMessage(role=PromptRole.ASSISTANT, content=None)

    def test_content_required(self):
        with self.assertRaises(ValidationError):
            ContentMessage(role=PromptRole.USER)  # type: ignore

    def test_empty_content_kept(self):
        msg = ContentMessage(role=PromptRole.ASSISTANT, content="")
        self.assertEqual(msg.to_map(), {'role': "assistant", 'content': ""})

    def test_no_tool_calls(self):
        msg = ContentMessage(role=PromptRole.USER, content="hi")
        self.assertEqual(msg.tool_calls, ())

    def test_tool_call_role_rejected(self):
        with self.assertRaises(ValidationError):
            ContentMessage(role=PromptRole.TOOL_CALL, content="hi")

    def test_role_from_string(self):
        msg = ContentMessage(role="system", content="be terse")  # type: ignore
        self.assertEqual(msg.role, PromptRole.SYSTEM)

    def test_invalid_role(self):
        with self.assertRaises(ValidationError):
            ContentMessage(role="narrator", content="hi")  # type: ignore

    def test_immutable(self):
        msg = ContentMessage(role=PromptRole.USER, content="hi")
        with self.assertRaises(ValidationError):
            msg.content = "bye"  # type: ignore


class TestToolCallMessage(unittest.TestCase):

    def test_tool_call_record(self):
        msg = ToolCallMessage(
            tool_call=ToolCall(name="lookup", parameters={'q': "x"})
        )
        self.assertEqual(
            msg.to_map(),
            {
                'role': "tool_call",
                'tool_calls': [
                    {'function': {'name': "lookup", 'arguments': {'q': "x"}}}
                ],
            },
        )
        self.assertNotIn('content', msg.to_map())

    def test_tool_calls_accessor(self):
        msg = ToolCallMessage(tool_call=ToolCall(name="lookup"))
        self.assertEqual(len(msg.tool_calls), 1)
        self.assertEqual(msg.tool_calls[0].function.name, "lookup")
        self.assertEqual(msg.tool_calls[0].function.arguments, {})
        self.assertEqual(msg.role, PromptRole.TOOL_CALL)

    def test_content_not_accepted(self):
        with self.assertRaises(ValidationError):
            ToolCallMessage(
                tool_call=ToolCall(name="lookup"), content="hi"  # type: ignore
            )

    def test_tool_call_required(self):
        with self.assertRaises(ValidationError):
            ToolCallMessage()  # type: ignore


class TestToolResult(unittest.TestCase):

    def test_to_json(self):
        result = ToolResult(tool_name="weather", result={'temp': 20})
        self.assertEqual(
            json.loads(result.to_json()),
            {'tool_name': "weather", 'result': {'temp': 20}},
        )

    def test_to_json_with_call_id(self):
        result = ToolResult(tool_name="weather", result="sunny", call_id="c1")
        self.assertEqual(json.loads(result.to_json())['call_id'], "c1")


if __name__ == "__main__":
    unittest.main()
