"""Localized content table.

Every language-specific string the core needs lives here, keyed by language
code: UI labels for the presentation layer, system-instruction templates,
schema field descriptions, the opening scene and the fallback turn. Adding a
language means adding one more Locale entry to LOCALES.

Instruction templates are Handlebars (see adventure_engine.prompts); they are
rendered with {"choice_count": ..., "language_name": ...}.
"""

from __future__ import annotations

import random
from typing import Literal

from pydantic import BaseModel

Language = Literal["en", "bn"]

DEFAULT_LANGUAGE: Language = "en"


class SidebarLabels(BaseModel):
    quest: str
    inventory: str
    empty_inventory: str
    start_quest: str


class ChatLabels(BaseModel):
    title: str
    placeholder: str
    send: str
    initial_message: str
    error_message: str


class FieldDescriptions(BaseModel):
    """Per-language descriptions for the five story-turn fields."""

    story_segment: str
    image_prompt: str
    choices: str
    inventory: str
    quest: str


class FallbackContent(BaseModel):
    story_segment: str
    image_prompt: str
    choices: list[str]
    quest: str


class Locale(BaseModel):
    code: Language
    language_name: str
    title: str
    intro: str
    start_button: str
    loading_messages: list[str]
    image_loader: str
    sidebar: SidebarLabels
    chatbot: ChatLabels
    initial_choice: str
    initial_history: str
    story_instruction: str
    chat_instruction: str
    fields: FieldDescriptions
    fallback: FallbackContent
    digits: str = "0123456789"

    def format_number(self, n: int) -> str:
        """Render n with this language's digit glyphs."""
        return "".join(self.digits[int(d)] for d in str(n))


_NEUTRAL_SCENE = "A mysterious, shimmering portal in a dark forest."


ENGLISH = Locale(
    code="en",
    language_name="English",
    title="Gemini Adventure Engine",
    intro=(
        "Embark on a limitless journey where every choice you make crafts a unique story. "
        "Powered by Gemini, this adventure engine generates a dynamic world, real-time images, "
        "and evolving quests just for you. No two adventures are ever the same."
    ),
    start_button="Start Your Adventure",
    loading_messages=[
        "Weaving the threads of fate...",
        "Consulting the ancient oracles...",
        "Painting the world with words...",
        "Summoning creatures from the ether...",
        "Charting a course through the unknown...",
        "Asking the stars for guidance...",
    ],
    image_loader="Painting your next scene...",
    sidebar=SidebarLabels(
        quest="Current Quest",
        inventory="Inventory",
        empty_inventory="Your backpack is empty.",
        start_quest="Your adventure is just beginning...",
    ),
    chatbot=ChatLabels(
        title="Gemini Assistant",
        placeholder="Ask something...",
        send="Send",
        initial_message="Hello! How can I help you?",
        error_message="Sorry, I encountered an error. Please try again.",
    ),
    initial_choice="Begin the adventure.",
    initial_history=(
        "You stand at the edge of a forgotten wood, a place whispered about in taverns but "
        "never visited. The air is thick with the scent of ancient earth and something else... "
        "something magical. Before you lies a choice."
    ),
    story_instruction=(
        "You are a master storyteller for an infinite text-based choose-your-own-adventure game. "
        "You create engaging, dynamic, and coherent narratives. The user will provide the story so far. "
        "Your task is to continue the story with a new segment, provide {{choice_count}} choices, "
        "and update the player's inventory and current quest based on the events. "
        "The story must evolve based on the player's choices. "
        "Respond ONLY in the specified JSON format. "
        "All responses must be in {{{language_name}}}, except the image prompt, which is always in English."
    ),
    chat_instruction="You are a helpful and friendly chatbot. Answer user questions concisely.",
    fields=FieldDescriptions(
        story_segment="The next paragraph of the story in English. It should be engaging and descriptive.",
        image_prompt=(
            "A concise, detailed visual description in English of the current scene "
            "for an image generation model."
        ),
        choices="An array of 3 distinct choices in English for the player.",
        inventory="An updated list of all items the player is carrying, in English.",
        quest="A brief, one-sentence description in English of the player's current main objective.",
    ),
    fallback=FallbackContent(
        story_segment=(
            "An unexpected twist of fate has occurred, but the path forward is unclear. "
            "The world shimmers, and you find yourself at a crossroads once more."
        ),
        image_prompt=_NEUTRAL_SCENE,
        choices=[
            "Step through the portal",
            "Look for another path",
            "Wait for something to happen",
        ],
        quest="Find your bearings in a new reality.",
    ),
)


BENGALI = Locale(
    code="bn",
    language_name="বাংলা",
    title="জেমিনি অ্যাডভেঞ্চার ইঞ্জিন",
    intro=(
        "এমন এক অসীম যাত্রায় অংশ নিন যেখানে আপনার প্রতিটি পছন্দ একটি অনন্য গল্প তৈরি করে। "
        "জেমিনি দ্বারা চালিত, এই অ্যাডভেঞ্চার ইঞ্জিনটি শুধুমাত্র আপনার জন্য একটি গতিশীল বিশ্ব, "
        "রিয়েল-টাইম ছবি এবং পরিবর্তনশীল কোয়েস্ট তৈরি করে। কোনো দুটি অ্যাডভেঞ্চার কখনও এক হয় না।"
    ),
    start_button="আপনার অভিযান শুরু করুন",
    loading_messages=[
        "ভাগ্যের সুতো বুনছি...",
        "প্রাচীন দৈববাণী শুনছি...",
        "শব্দ দিয়ে বিশ্ব আঁকছি...",
        "মহাশূন্য থেকে প্রাণী ডাকছি...",
        "অজানার পথে পা বাড়াচ্ছি...",
        "নক্ষত্রদের কাছে নির্দেশনা চাইছি...",
    ],
    image_loader="আপনার পরবর্তী দৃশ্য আঁকা হচ্ছে...",
    sidebar=SidebarLabels(
        quest="বর্তমান কোয়েস্ট",
        inventory="ইনভেন্টরি",
        empty_inventory="আপনার ব্যাগ খালি।",
        start_quest="আপনার অভিযান সবে শুরু হয়েছে...",
    ),
    chatbot=ChatLabels(
        title="জেমিনি অ্যাসিস্ট্যান্ট",
        placeholder="কিছু জিজ্ঞাসা করুন...",
        send="পাঠান",
        initial_message="নমস্কার! আমি আপনাকে কিভাবে সাহায্য করতে পারি?",
        error_message="দুঃখিত, একটি ত্রুটি ঘটেছে। আবার চেষ্টা করুন।",
    ),
    initial_choice="অভিযান শুরু করুন।",
    initial_history=(
        "আপনি এক বিস্মৃত বনের ধারে দাঁড়িয়ে আছেন, এমন এক জায়গা যা শুঁড়িখানায় আলোচিত হলেও "
        "কেউ কখনও যায়নি। বাতাস প্রাচীন পৃথিবীর ঘ্রাণে এবং আরও কিছুতে... জাদুকরী কিছুতে ভরা। "
        "আপনার সামনে একটি পছন্দ রয়েছে।"
    ),
    story_instruction=(
        "আপনি একজন দক্ষ গল্পকার। আপনি একটি টেক্সট-ভিত্তিক অ্যাডভেঞ্চার গেমের জন্য আকর্ষক, গতিশীল "
        "এবং সুসংগত কাহিনী তৈরি করেন। ব্যবহারকারী আপনাকে এ পর্যন্ত গল্পটি দেবে। আপনার কাজ হল একটি "
        "নতুন অংশ দিয়ে গল্পটি এগিয়ে নিয়ে যাওয়া, {{choice_count}}টি পছন্দ দেওয়া, এবং ঘটনাগুলির উপর "
        "ভিত্তি করে খেলোয়াড়ের ইনভেন্টরি এবং বর্তমান কোয়েস্ট আপডেট করা। খেলোয়াড়ের পছন্দের উপর "
        "ভিত্তি করে গল্পটি বিকশিত হতে হবে। শুধুমাত্র নির্দিষ্ট JSON ফরম্যাটে উত্তর দিন। "
        "সমস্ত উত্তর অবশ্যই {{{language_name}}}য় হতে হবে, তবে ছবির বর্ণনা সবসময় ইংরেজিতে লিখুন।"
    ),
    chat_instruction="আপনি একজন সহায়ক এবং বন্ধুত্বপূর্ণ চ্যাটবট। ব্যবহারকারীর প্রশ্নের উত্তর সংক্ষেপে দিন।",
    fields=FieldDescriptions(
        story_segment="গল্পের পরবর্তী অনুচ্ছেদটি বাংলায় লিখুন। এটি আকর্ষণীয় এবং বর্ণনামূলক হওয়া উচিত।",
        image_prompt=(
            "A concise, detailed visual description in English of the current scene "
            "for an image generation model."
        ),
        choices="খেলোয়াড়ের জন্য বাংলায় ৩টি ভিন্ন পছন্দের একটি তালিকা দিন।",
        inventory="খেলোয়াড়ের কাছে থাকা সমস্ত জিনিসের একটি আপডেট করা তালিকা বাংলায় দিন।",
        quest="খেলোয়াড়ের বর্তমান প্রধান উদ্দেশ্যের একটি সংক্ষিপ্ত, এক-বাক্যের বর্ণনা বাংলায় দিন।",
    ),
    fallback=FallbackContent(
        story_segment=(
            "এক অপ্রত্যাশিত ভাগ্য পরিবর্তন ঘটেছে, কিন্তু সামনের পথ পরিষ্কার নয়। পৃথিবী ঝিকমিক করছে, "
            "এবং আপনি নিজেকে আবার একটি চৌরাস্তায় খুঁজে পাচ্ছেন।"
        ),
        image_prompt=_NEUTRAL_SCENE,
        choices=[
            "পোর্টালের মধ্যে প্রবেশ করুন",
            "অন্য পথের সন্ধান করুন",
            "কিছু ঘটার জন্য অপেক্ষা করুন",
        ],
        quest="নতুন বাস্তবতায় আপনার অবস্থান খুঁজুন।",
    ),
    digits="০১২৩৪৫৬৭৮৯",
)


LOCALES: dict[str, Locale] = {
    ENGLISH.code: ENGLISH,
    BENGALI.code: BENGALI,
}


def get_locale(language: str) -> Locale:
    """Look up the content table for a language code.

    Raises KeyError for languages that have no table.
    """
    try:
        return LOCALES[language]
    except KeyError:
        raise KeyError(f"Unsupported language: {language!r}") from None


def random_loading_message(language: str) -> str:
    """Pick one of the rotating loader lines shown while a turn is generated."""
    return random.choice(get_locale(language).loading_messages)
