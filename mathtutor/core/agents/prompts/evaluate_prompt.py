from mathtutor.core.agents.prompts.generation_prompt import NO_MARKDOWN_INSTRUCTION
from mathtutor.core.agents.prompts.prompt_spec import PromptSpec

EVALUATION_PROMPT = PromptSpec(
    template="""Evaluate if the following answer to the math problem is correct. Be helpful and educational, but also be forgiving and generous in your evaluation.

Problem: {problem}
User's Answer: {user_answer}

Return the result as raw JSON with the following structure:
{{
    "isCorrect": true/false,
    "feedback": "Detailed feedback on the answer"
}}

Keep the feedback brief and under 200 characters. If the answer is partially correct, consider marking it as correct and provide guidance in the feedback.

""" + NO_MARKDOWN_INSTRUCTION,
    temperature=0.3,
    max_output_size=500,
)


def get_evaluation_prompt(problem: str, user_answer: str) -> str:
    """Render the answer-evaluation prompt."""
    return EVALUATION_PROMPT.render(problem=problem, user_answer=user_answer)
