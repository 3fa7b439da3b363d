from .html_document import HtmlDocument

__all__ = ["HtmlDocument"]
