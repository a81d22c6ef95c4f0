"""Fixed website QA checklist cloned into every new report."""

from qareport.core.schemas_qa import ChecklistCategory, ChecklistItem, ChecklistSection

# category -> [(section_id, section_title, [item text, ...]), ...]
# Order drives wizard navigation; keep it stable once reports exist.
WEBSITE_QA_TEMPLATE: list[tuple[str, list[tuple[str, str, list[str]]]]] = [
    (
        "Design & Layout",
        [
            (
                "visual-design",
                "Visual Design",
                [
                    "Brand colors, fonts and logo match the style guide",
                    "Spacing and alignment are consistent across pages",
                    "Images are sharp, correctly cropped and not stretched",
                    "No placeholder or lorem ipsum content remains",
                ],
            ),
            (
                "responsive-design",
                "Responsive Design",
                [
                    "Layout works on mobile (375px) without horizontal scrolling",
                    "Layout works on tablet (768px) and desktop (1440px)",
                    "Navigation menu collapses and opens correctly on mobile",
                    "Tap targets are large enough on touch devices",
                ],
            ),
        ],
    ),
    (
        "Content",
        [
            (
                "copy-review",
                "Copy Review",
                [
                    "Spelling and grammar checked on every page",
                    "Headings follow a logical hierarchy (one H1 per page)",
                    "Contact details, addresses and phone numbers are correct",
                    "Legal pages (privacy policy, terms) are present and linked",
                ],
            ),
            (
                "media",
                "Media",
                [
                    "All images have meaningful alt text",
                    "Videos play and have captions where needed",
                    "Downloadable files open and are the latest versions",
                ],
            ),
        ],
    ),
    (
        "Functionality",
        [
            (
                "navigation-links",
                "Navigation & Links",
                [
                    "All internal links resolve with no 404 pages",
                    "External links open the intended destination",
                    "Custom 404 page is in place and links back home",
                    "Breadcrumbs and menus highlight the current page",
                ],
            ),
            (
                "forms",
                "Forms",
                [
                    "Required fields are validated with clear error messages",
                    "Successful submissions show a confirmation",
                    "Form submissions reach the intended inbox or system",
                    "Spam protection is enabled on public forms",
                ],
            ),
            (
                "cross-browser",
                "Cross-Browser",
                [
                    "Site works in the latest Chrome, Firefox, Safari and Edge",
                    "No console errors on key pages",
                ],
            ),
        ],
    ),
    (
        "Performance & SEO",
        [
            (
                "performance",
                "Performance",
                [
                    "Pages load in under 3 seconds on a 4G connection",
                    "Images are compressed and served in modern formats",
                    "CSS and JavaScript are minified",
                ],
            ),
            (
                "seo-basics",
                "SEO Basics",
                [
                    "Every page has a unique title and meta description",
                    "sitemap.xml and robots.txt are present and correct",
                    "Open Graph tags render a sensible social preview",
                    "Analytics tracking fires on page views",
                ],
            ),
        ],
    ),
    (
        "Security & Accessibility",
        [
            (
                "security",
                "Security",
                [
                    "HTTPS is enforced and the certificate is valid",
                    "Admin areas are not publicly indexed",
                    "No sensitive data is exposed in page source",
                ],
            ),
            (
                "accessibility",
                "Accessibility",
                [
                    "Text meets WCAG AA color contrast",
                    "All interactive elements are reachable by keyboard",
                    "Focus states are visible",
                    "Form fields have associated labels",
                ],
            ),
        ],
    ),
]


def build_initial_checklist() -> list[ChecklistCategory]:
    """Return a fresh, fully unchecked copy of the QA checklist template."""
    categories = []
    for category_name, sections in WEBSITE_QA_TEMPLATE:
        categories.append(
            ChecklistCategory(
                category=category_name,
                sections=[
                    ChecklistSection(
                        section_id=section_id,
                        section_title=title,
                        items=[
                            ChecklistItem(id=f"{section_id}-{index}", text=text, checked=False)
                            for index, text in enumerate(items, start=1)
                        ],
                    )
                    for section_id, title, items in sections
                ],
            )
        )
    return categories
