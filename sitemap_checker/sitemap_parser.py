import logging
from typing import List, Dict, Union, Any
from lxml import etree # Using lxml for robust parsing and namespace handling

logger = logging.getLogger(__name__)

SITEMAP_NS = {'sm': 'http://www.sitemaps.org/schemas/sitemap/0.9'}


class SitemapParser:
    def __init__(self):
        logger.debug("SitemapParser initialized.")

    def parse_sitemap(self, xml_content: Union[str, bytes], sitemap_url: str = "") -> Dict[str, Any]:
        """
        Parses the given XML sitemap content.

        Determines if it's a sitemap index or a URL set and extracts the <loc> values.

        Args:
            xml_content: The XML content of the sitemap.
            sitemap_url: The URL from which this sitemap was fetched (for logging/context).

        Returns:
            A dictionary with:
                'type': 'sitemapindex' or 'urlset' or 'error'
                'urls': Page URL strings (urlset) or child sitemap URL strings
                        (sitemapindex), in document order. None on error.
                'error_message': A string describing the error, if any.
        """
        if not xml_content:
            logger.error(f"Cannot parse empty XML content (from {sitemap_url}).")
            return {"type": "error", "urls": None, "error_message": "Empty XML content"}

        if isinstance(xml_content, str):
            xml_content = xml_content.strip().encode('utf-8')

        try:
            parser = etree.XMLParser(remove_blank_text=True, resolve_entities=False, no_network=True)
            root = etree.fromstring(xml_content, parser=parser)
        except etree.XMLSyntaxError as e:
            logger.error(f"XML syntax error while parsing sitemap from {sitemap_url}: {e}")
            return {"type": "error", "urls": None, "error_message": f"XMLSyntaxError: {e}"}

        root_tag_name = etree.QName(root.tag).localname

        if root_tag_name == 'sitemapindex':
            logger.info(f"Parsing as sitemap index: {sitemap_url}")
            return {"type": "sitemapindex", "urls": self._extract_locs(root, 'sitemap'), "error_message": None}
        elif root_tag_name == 'urlset':
            logger.info(f"Parsing as URL set: {sitemap_url}")
            return {"type": "urlset", "urls": self._extract_locs(root, 'url'), "error_message": None}

        msg = f"Unknown root element '{root.tag}' in {sitemap_url}."
        logger.error(msg)
        return {"type": "error", "urls": None, "error_message": msg}

    def _extract_locs(self, root_element: etree._Element, entry_tag: str) -> List[str]:
        """Extracts <loc> text from each <url> or <sitemap> child, with or without the sitemap namespace."""
        locs = []
        for entry in root_element:
            if not isinstance(entry.tag, str) or etree.QName(entry.tag).localname != entry_tag:
                continue
            loc_el = entry.find('sm:loc', SITEMAP_NS)
            if loc_el is None:
                loc_el = entry.find('loc')
            if loc_el is not None and loc_el.text and loc_el.text.strip():
                locs.append(loc_el.text.strip())
            else:
                # An entry without a <loc> is invalid according to the sitemap protocol
                logger.warning(f"Skipping <{entry_tag}> entry without <loc> tag.")
        logger.debug(f"Extracted {len(locs)} <{entry_tag}> locations.")
        return locs
