from typing import List

from bs4 import BeautifulSoup


class ContentReviewService:
    def extract_hrefs(self, html: str) -> List[str]:
        """Return the raw href values of every anchor in `html`, in document order."""
        if not html:
            return []
        soup = BeautifulSoup(html, "html.parser")
        hrefs = []
        for a in soup.find_all("a", href=True):
            href = a.get("href")
            if href and href.strip():
                hrefs.append(href.strip())
        return hrefs

    def base_href(self, html: str):
        """Return the document's <base href> if one is declared."""
        if not html:
            return None
        soup = BeautifulSoup(html, "html.parser")
        base = soup.find("base", href=True)
        return base.get("href") if base is not None else None
