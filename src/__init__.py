"""sitecontent: cached content access for a static content site.

Loads articles, guides and quizzes from disk, keeps one snapshot per
collection in memory, ranks related items and validates quizzes.
"""

__version__ = "0.1.0"
