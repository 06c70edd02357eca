from mathtutor.core.agents.prompts.generation_prompt import NO_MARKDOWN_INSTRUCTION
from mathtutor.core.agents.prompts.prompt_spec import PromptSpec

GUIDANCE_PROMPT = PromptSpec(
    template="""Provide guidance for a student who is working on this math problem:
Problem: {problem}
Correct Solution: {solution}
Student's Answer: {user_answer}
Student's Question: {question}

Provide helpful, step-by-step guidance that addresses the student's specific question and helps them understand the problem better. Be educational and supportive.
Keep your response concise and under 500 characters.

Return the result as raw JSON with the following structure:
{{
    "guidance": "Detailed guidance that addresses the student's question and helps them understand the problem"
}}

""" + NO_MARKDOWN_INSTRUCTION,
    temperature=0.5,
    max_output_size=600,
)


def get_guidance_prompt(problem: str, solution: str, user_answer: str, question: str) -> str:
    """Render the guidance prompt."""
    return GUIDANCE_PROMPT.render(
        problem=problem,
        solution=solution,
        user_answer=user_answer,
        question=question,
    )
