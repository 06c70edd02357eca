from mathtutor.core.agents.prompts.prompt_spec import PromptSpec

NO_MARKDOWN_INSTRUCTION = (
    "VERY IMPORTANT: Do not use markdown formatting. Do not wrap the JSON in code blocks or ```json tags. "
    "Only return the pure JSON object without any additional text or formatting. "
    "The first character should be '{{' and the last character should be '}}'."
)

GENERATION_PROMPT = PromptSpec(
    template="""Generate a math problem on the topic of {topic} with {difficulty} difficulty level.
Return the result as raw JSON with the following structure:
{{
    "statement": "The problem statement",
    "solution": "The correct answer",
    "explanation": "Step-by-step explanation of how to solve the problem"
}}

Keep the explanation brief and under 250 characters.
""" + NO_MARKDOWN_INSTRUCTION,
    temperature=0.7,
    max_output_size=800,
)


def get_generation_prompt(topic: str, difficulty: str) -> str:
    """Render the problem-generation prompt."""
    return GENERATION_PROMPT.render(topic=topic, difficulty=difficulty)
