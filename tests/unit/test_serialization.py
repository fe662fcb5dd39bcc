"""
Tests for timeline serialization (JSON dicts and one-line text).
"""

import json
import math

from jsviz.runtime.dom import DomOperation, DomOperationType
from jsviz.runtime.serialization import (
    dom_operation_to_dict, format_step, step_to_dict, timeline_to_json, value_to_json,
)
from jsviz.shared.values import UNDEFINED, ObjectReference
from tests.test_utils import steps_starting_with


class TestValues:
    def test_plain_values_pass_through(self):
        assert value_to_json(1) == 1
        assert value_to_json("s") == "s"
        assert value_to_json(None) is None
        assert value_to_json(True) is True

    def test_tagged_values(self):
        assert value_to_json(UNDEFINED) == {"type": "undefined"}
        assert value_to_json(ObjectReference("heap_3")) == {"type": "reference", "heapId": "heap_3"}
        assert value_to_json(math.nan) == {"type": "number", "value": "NaN"}
        assert value_to_json(-math.inf) == {"type": "number", "value": "-Infinity"}

    def test_dom_operation(self):
        plain = DomOperation(DomOperationType.SET_TEXT_CONTENT, "#a", "x")
        assert dom_operation_to_dict(plain) == {"type": "setTextContent", "selector": "#a", "value": "x"}
        prop = DomOperation(DomOperationType.SET_PROPERTY, "#a", "1", property="value")
        assert dom_operation_to_dict(prop)["property"] == "value"


class TestTimeline:
    def test_step_layout(self, run_js):
        result = run_js("let x = 1;\nconst o = { a: undefined };")
        data = json.loads(timeline_to_json(result.steps))
        assert [step["id"] for step in data] == list(range(len(data)))
        declare = data[1]
        assert declare["type"] == "declaration"
        assert declare["description"] == "Declare let x = 1"
        assert (declare["line"], declare["column"]) == (1, 0)
        assert "domOperation" not in declare

        scopes = data[-1]["scopeSnapshot"]
        assert scopes["currentScopeId"] == "scope_0"
        global_scope = scopes["scopes"][0]
        assert global_scope["type"] == "global"
        assert global_scope["parentId"] is None
        assert global_scope["variables"]["x"]["value"] == 1
        assert global_scope["variables"]["o"]["value"] == {"type": "reference", "heapId": "heap_0"}

        heap = data[-1]["memorySnapshot"]["heap"]
        assert heap[0]["id"] == "heap_0"
        assert heap[0]["properties"] == {"a": {"type": "undefined"}}
        stack = data[-1]["memorySnapshot"]["callStack"]
        assert stack[0]["id"] == "frame_0"
        assert stack[0]["scopeId"] == "scope_0"

    def test_function_and_closure(self, run_js):
        result = run_js("""
        function make() {
            let hidden = 4;
            return () => hidden;
        }
        const get = make();
        """)
        data = step_to_dict(result.final_step)
        functions = [obj for obj in data["memorySnapshot"]["heap"] if obj["type"] == "function"]
        arrow = next(obj for obj in functions if obj.get("closure"))
        assert arrow["closure"][0]["name"] == "hidden"
        assert arrow["closure"][0]["value"] == 4
        assert arrow["closure"][0]["fromScope"] == "make"

    def test_call_frame_layout(self, run_js):
        result = run_js("function f(a) {\n  return a;\n}\nf(2);")
        call = step_to_dict(steps_starting_with(result, "Call f")[0])
        frame = call["memorySnapshot"]["callStack"][-1]
        assert frame["functionName"] == "f"
        assert frame["returnAddress"] == 4
        assert frame["localVariables"][0] == {"name": "a", "value": 2, "kind": "var"}

    def test_nan_is_valid_json(self, run_js):
        result = run_js("const n = 0 / 0;")
        text = timeline_to_json(result.steps)
        assert "NaN" in text
        decoded = json.loads(text)
        assert decoded[-1]["scopeSnapshot"]["scopes"][0]["variables"]["n"]["value"] == {
            "type": "number", "value": "NaN"}

    def test_dom_operation_in_step(self, run_js):
        result = run_js("document.getElementById('t').textContent = 'hi';")
        data = json.loads(timeline_to_json(result.steps))
        dom = [step for step in data if "domOperation" in step]
        assert len(dom) == 1
        assert dom[0]["domOperation"] == {"type": "setTextContent", "selector": "#t", "value": "hi"}


class TestFormatStep:
    def test_text_line(self, run_js):
        result = run_js("let x = 1;")
        assert format_step(result.steps[1]) == "  1 [declaration] 1:0 Declare let x = 1"

    def test_text_line_with_dom(self, run_js):
        result = run_js("document.querySelector('p').innerHTML = 'x';")
        assert format_step(result.steps[1]).endswith("<setInnerHTML p='x'>")
