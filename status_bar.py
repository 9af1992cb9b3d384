import os
import time


def render_status(context, width):
    """
    context keys: status_msg, status_until, mode, file_path, catalog_status,
                  table_name, shape, cursor, row_count, error
    """
    text = ""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        mode = context.get("mode", "catalog")
        fname = context.get("file_path") or ""
        if fname:
            fname = os.path.basename(fname)
        if mode == "catalog":
            label = "FILTER" if context.get("filtering") else "CATALOG"
            text = f" {label} | {fname} | {context.get('catalog_status', '')}"
        else:
            label = "SELECT" if mode == "selection" else "VIEW"
            shape = context.get("shape", "")
            row_count = context.get("row_count", 0)
            cursor = context.get("cursor", 0)
            text = f" {label} | {fname} | {context.get('table_name', '')} | ({shape}) | row {cursor + 1}/{row_count}"
            if context.get("error"):
                text += f" | ! {context['error']}"

    return text.ljust(width)[:width]
