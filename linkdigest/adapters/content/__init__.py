from linkdigest.adapters.content.content_extractor import ContentExtractor
from linkdigest.adapters.content.html_content import PageContent, parse_page

__all__ = ["ContentExtractor", "PageContent", "parse_page"]
