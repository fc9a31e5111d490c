from pydantic import BaseModel, Field


class CodeBlock(BaseModel):
    code: str = Field(..., description="Complete Python source that satisfies the tests")
