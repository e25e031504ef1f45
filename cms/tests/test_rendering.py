from django.test import SimpleTestCase

from cms.models import Content
from cms.rendering import render_body


class RenderBodyTests(SimpleTestCase):
    def test_markdown_is_rendered(self):
        html = render_body("# Title\n\n**bold**", Content.RenderingStrategy.MARKDOWN)
        self.assertIn("<strong>bold</strong>", html)
        self.assertIn("<h1", html)

    def test_scripts_are_stripped(self):
        html = render_body(
            "<p>Hi</p><script>alert(1)</script>", Content.RenderingStrategy.HTML
        )
        self.assertIn("<p>Hi</p>", html)
        self.assertNotIn("<script>", html)

    def test_javascript_links_removed(self):
        html = render_body("[x](javascript:alert(1))", Content.RenderingStrategy.MARKDOWN)
        self.assertNotIn("javascript:", html)

    def test_plain_text_is_escaped(self):
        html = render_body("a < b\nnext", Content.RenderingStrategy.PLAIN)
        self.assertIn("&lt;", html)
        self.assertIn("<br>", html)

    def test_empty_body(self):
        self.assertEqual(render_body("", Content.RenderingStrategy.MARKDOWN), "")

    def test_plain_text_markup_is_not_executed(self):
        html = render_body("<script>alert(1)</script>", Content.RenderingStrategy.PLAIN)
        self.assertNotIn("<script>", html)
        self.assertIn("&lt;script&gt;", html)
