"""
Compact summaries of node type properties for debug prompts.

Full property definitions are large; the model only needs names, types,
display conditions and the option tree.
"""

from typing import Any, Dict, List


def summarize_option(option: Dict[str, Any]) -> Dict[str, Any]:
    """Summarize a single option: a value, a group of values, or a nested property."""
    if "value" in option:
        return {"name": option.get("name"), "value": option["value"]}

    if "values" in option:
        return {
            "name": option.get("name"),
            "values": [summarize_property(value) for value in option["values"]],
        }

    return summarize_property(option)


def summarize_property(prop: Dict[str, Any]) -> Dict[str, Any]:
    summary: Dict[str, Any] = {
        "name": prop.get("displayName"),
        "type": prop.get("type"),
    }

    if prop.get("displayOptions"):
        summary["displayOptions"] = prop["displayOptions"]

    if prop.get("options"):
        summary["options"] = [summarize_option(option) for option in prop["options"]]

    return summary


def summarize_node_type_properties(properties: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Summarize every property of a node type, preserving order."""
    return [summarize_property(prop) for prop in properties]
