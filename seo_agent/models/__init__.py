"""Typed models used across the agent."""

from .competitor import ArticleSignal, CompetitorConfig, CompetitorReport
from .content import ArticleTemplate, GeneratedArticle, Identity, Post, Site
from .suggestion import PRIORITY_ORDER, ArticleSuggestion, Priority, TopicEntry

__all__ = [
    "ArticleSignal",
    "CompetitorConfig",
    "CompetitorReport",
    "ArticleTemplate",
    "GeneratedArticle",
    "Identity",
    "Post",
    "Site",
    "PRIORITY_ORDER",
    "ArticleSuggestion",
    "Priority",
    "TopicEntry",
]
