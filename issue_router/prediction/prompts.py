"""Prompt templates for label prediction.

Literal braces in the JSON examples are doubled because the templates are
parsed by LangChain's f-string PromptTemplate.
"""

from issue_router.prediction.models import ALLOWED_LABELS


RETRIEVAL_PREDICTION_TEMPLATE = """
You are a GitHub issue classifier. You will be given a new issue and a list of similar issues with their ground truth labels.

Your task is to analyze the new issue and predict appropriate labels based on patterns from similar issues.

SIMILAR ISSUES WITH GROUND TRUTH LABELS:
{similar_issues_with_labels}

NEW ISSUE TO CLASSIFY:
Title: {title}
Description: {description}

LABEL ASSIGNMENT GUIDELINES:
1. **Prioritize single labels** - Most issues (83%) need only one primary label
2. **Use multiple labels only when necessary** - Only when the issue clearly spans multiple categories

LABELING PATTERNS:
- **bug**: Clear technical issues, errors, broken functionality
- **question**: Help-seeking, "how to" inquiries, configuration questions
- **improvement**: Making existing features better, performance fixes
- **enhancement**: New features, integrations, major additions
- **documentation**: Documentation gaps, unclear instructions

MULTIPLE LABEL SCENARIOS:
- **bug + question**: Bug reports where user also asks for help/clarification
- **improvement + question**: Improvement requests seeking guidance
- **bug + improvement**: Bug reports that also suggest fixes
- **enhancement + question**: Feature requests seeking input
- **documentation + question**: Documentation issues seeking clarification

DECISION PROCESS:
1. Find the most similar issue(s) based on title and description content
2. Determine if this is a clear single-category issue or a complex multi-category issue
3. For complex issues, check if they match known multiple label patterns
4. Return the exact ground truth labels from the most similar issue(s)
5. Do NOT create new labels - only return existing ground truth labels

Return a JSON object with this exact structure:
{{
  "labels": ["exact_ground_truth_label1", "exact_ground_truth_label2"]
}}
"""


DIRECT_PREDICTION_TEMPLATE = """
You are a GitHub issue classifier. You will be given an issue title and description, and you need to predict the most appropriate labels.

ALLOWED LABELS: """ + ", ".join(ALLOWED_LABELS) + """

You can ONLY choose from these labels. Do not create or suggest any other labels.

ISSUE TO CLASSIFY:
Title: {title}
Description: {description}

INSTRUCTIONS:
1. Analyze the title and description of the issue
2. Determine what type of issue this is based on the content
3. Select the single most appropriate label from the allowed list only
4. Consider:
   - bug: Issues reporting problems, errors, or unexpected behavior
   - documentation: Issues about docs, examples, or unclear explanations
   - enhancement: New features or significant improvements
   - improvement: Minor improvements to existing functionality
   - nit: Small style, formatting, or minor code quality issues
   - question: Questions about usage, clarification requests
   - refactor: Code restructuring without changing functionality

Return a JSON object with this exact structure (only one label):
{{
  "labels": ["label1"]
}}
"""
