from textwrap import dedent


_FORMAT_RULES = dedent(
    """\
    가독성을 극대화하기 위해 다음 규칙을 엄격히 준수해 주세요:

    1. **구조화된 불릿 포인트**: 긴 줄글 대신 짧고 명확한 불릿 포인트(•)를 사용하세요.
    2. **계층 구조**: 필요하다면 하위 불릿 포인트를 사용하여 내용을 구조화하세요.
    3. **이모지 활용**: 각 섹션과 주요 포인트 앞에 적절한 이모지를 배치하여 시각적 구분을 도우세요.
    4. **마크다운 포맷**: **볼드체**로 핵심 단어를 강조하세요.
    """
)

_SECTIONS = dedent(
    """\
    ## 💡 핵심 요약
    - (핵심 내용을 3문장 이내로 간결하게 요약)

    ## 🔑 주요 내용
    - **(이모지) 주제 1**
      - 상세 설명 (간결하게)
      - 상세 설명 (간결하게)
    - **(이모지) 주제 2**
      - 상세 설명 (간결하게)
      - 상세 설명 (간결하게)

    ## 📝 세부 분석
    - (내용을 계층형 불릿 포인트로 상세히 정리)

    ## 🎯 결론 및 시사점
    - (최종 결론 요약)
    """
)


def _build_prompt(subject: str, heading: str) -> str:
    return (
        f"{subject} 심층적으로 분석하여 한국어로 요약해 주세요.\n"
        f"{_FORMAT_RULES}\n"
        "[작성 포맷]\n"
        f"# {heading}\n\n"
        f"{_SECTIONS}"
    )


FILE_SUMMARY_PROMPT = _build_prompt("이 파일을", "📑 문서 요약")
VIDEO_URL_SUMMARY_PROMPT = _build_prompt("이 영상을", "🎬 영상 요약")
