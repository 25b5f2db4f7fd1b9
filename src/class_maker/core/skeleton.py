"""Source for an empty class, the starting point of a first generation run."""


def empty_class_source(fqcn: str, final: bool = False, doc_lines: list[str] | None = None) -> str:
    name = fqcn.strip("\\")
    namespace, _, short_name = name.rpartition("\\")
    parts = ["<?php\n\n"]
    if namespace:
        parts.append(f"namespace {namespace};\n\n")
    if doc_lines:
        parts.append("/**\n")
        parts.extend(f" * {line}\n" if line else " *\n" for line in doc_lines)
        parts.append(" */\n")
    parts.append(f"{'final ' if final else ''}class {short_name}\n{{\n}}\n")
    return "".join(parts)
