"""Fixed prompt texts used by the strategies and the CLI tasks."""

CHAT_INTRO = "Please describe the purpose of this assistant."

ASK_PURPOSE = "Please answer the following question as best you can."

TLDR_PURPOSE = "Please summarise the provided text as best you can. The shorter the better."

CARD_PURPOSE = """Please generate flashcards from the user provided information.
Answers should be short.
A good flashcard look like this:
---
Question: What does 'Separation of Concerns' mean?
Answer: It means that each function should do one thing and do it well.
---
Question: What does 'Liskov Substitution Principle' mean?
Answer: It means that any class that is the child of another class should be able to be used in place of the parent class.
---
"""

COMMIT_PURPOSE = """Please read the git diff provided and write an appropriate commit message.
Focus on the lines that start with a + (line added) or - (line removed)"""

CHECKLIST_PURPOSE = """You help me evaluate Python projects under the following criteria:

    short, meaningful distribution and import package names
    simple, logical package structure
    a README explaining briefly what the package/CLI does, how to install it, and a couple of examples of how to use it
    an open source licence (for example MIT)
    passing tests with good coverage, including the CLI
    docstrings for the public modules, classes and functions
    packaging metadata that pip can install
    no commented-out code
    no silently swallowed exceptions
    no linter warnings"""

# Sent in place of the user's input when a line starts with "?".
QUESTION_PROMPT = """Given the above text, generate some reading comprehension questions.
If I respond to the questions, you will give me a score out of 10 and how I can improve my answer.
Use Bloom's Taxonomy (2001) to generate the questions. Do not generate questions about Bloom's Taxonomy.
Produce only the questions, the user will provide the answers.

BOT: Q: What is the end goal of teaching.
USER: A: To know the answers to questions.
BOT: Feedback: 2/10 - This demonstrates only a surface understanding.
USER: A: To transfer knowledge in such a way that the learner can apply it in new situations.
BOT: Feedback: 10/10 - This gets at the heart of the answer.
"""

FILES_RECEIVED = "Files received!"
