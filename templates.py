"""
内容模板库 - template pools, filler vocabulary and static fallback content.
Pool order is part of the output contract: indices are derived from the
birth seed, so reordering an entry changes every stored report.
"""
from models import GeneratedContent, HealthAdvice, HealthItem, WealthAdvice

CONTENT_TEMPLATES = {
    "personality": [
        # 自然系
        "妳的生命底色如同{season}的{nature}，带有{quality}的气质与{strength}的内在力量。妳擅长在{environment}中寻找平衡，内心深处有着{trait}的感知力。",
        # 艺术系
        "妳的性格如同{art_style}的画作，层次丰富而{color_tone}。妳有着{creative_trait}的创造力，善于将{inspiration}转化为独特的表达方式。",
        # 哲学系
        "妳的内在世界如同{philosophy}般深邃，拥有{wisdom_trait}的洞察力。妳倾向于通过{thinking_way}来理解世界，在{life_aspect}中展现出独特的智慧。",
        # 能量系
        "妳的能量场呈现{energy_pattern}的流动状态，具有{energy_trait}的特质。妳的{power_source}能够为周围的人带来{positive_effect}的影响。",
        # 元素系
        "妳的本质与{element}元素共振，展现出{element_trait}的特性。妳在{element_environment}中能够发挥最佳状态，拥有{element_power}的天赋能力。",
    ],
    "career": [
        "妳的事业发展呈现{career_pattern}的轨迹，适合在{industry}领域发挥才能。建议关注{opportunity}的机会，通过{development_way}来提升竞争力。",
        "妳具备{skill_type}的核心能力，在{work_environment}中能够展现优势。未来可以考虑向{direction}发展，重点培养{key_skill}技能。",
        "当前妳的事业运势处于{phase}阶段，{timing}是关键的转折点。把握{chance}的机会，可以在{field}领域获得突破。",
    ],
    "wealth": [
        "妳的财运呈现{wealth_pattern}的特点，适合{investment_style}的理财方式。建议在{timing}关注{investment_target}，通过{strategy}来积累财富。",
        "妳的主要财富来源倾向于{income_source}，具有{earning_trait}的赚钱能力。可以考虑开发{side_income}作为补充收入。",
        "妳在财务管理上展现{management_style}的特点，建议加强{weak_area}方面的规划。通过{improvement_way}可以提升财务状况。",
    ],
    "love": [
        "妳在感情中展现{love_style}的特质，倾向于{relationship_pattern}的相处模式。理想的伴侣类型是{partner_type}，需要在{aspect}方面多加注意。",
        "妳的情感表达方式偏向{expression_style}，在{situation}中能够展现真实的自己。建议通过{communication_way}来增进感情交流。",
        "妳对婚姻家庭有着{family_view}的期待，适合{marriage_timing}建立稳定关系。在{family_role}方面能够发挥重要作用。",
    ],
    "health": [
        "妳的体质特点偏向{constitution_type}，需要特别关注{health_focus}方面的保养。建议采用{health_method}的养生方式。",
        "妳适合{lifestyle_pattern}的生活节奏，在{time_period}进行{activity}对健康最为有益。注意避免{health_risk}的不良习惯。",
        "妳的情绪状态与{emotion_pattern}相关，建议通过{emotion_method}来调节心理健康。在{stress_situation}时要特别注意情绪管理。",
    ],
    "advice": [
        "今日适合进行{action_type}的活动，在{time_range}是最佳时机。建议{specific_action}，这将为妳带来{benefit}的效果。",
        "保持{mindset}的心态是今日的关键，面对{challenge}时要{attitude}。通过{mental_practice}可以提升内在能量。",
        "今日妳的能量适合{energy_activity}，避免{avoid_activity}。在{environment}中进行{practice}能够最大化能量效果。",
    ],
}

# Template selection/fill offsets per category
CATEGORY_OFFSETS = {
    "personality": 0,
    "career": 100,
    "wealth": 200,
    "love": 300,
    "health": 400,
    "advice": 500,
}

VARIABLE_LIBRARY = {
    "season": ["初春", "盛夏", "金秋", "寒冬", "晚春", "初夏", "深秋", "暖冬"],
    "nature": ["雨后森林", "晨曦海岸", "雪山之巅", "花田小径", "竹林深处", "溪流石畔"],
    "quality": ["清新", "温润", "坚韧", "灵动", "沉稳", "优雅", "纯净", "深邃"],
    "strength": ["生长", "包容", "突破", "创造", "守护", "转化", "净化", "觉醒"],
    "environment": ["喧嚣", "宁静", "变化", "挑战", "机遇", "困境", "繁华", "简朴"],
    "trait": ["敏锐", "深刻", "细腻", "直觉", "理性", "感性", "独特", "全面"],

    "art_style": ["印象派", "抽象派", "写实主义", "浪漫主义", "现代主义", "极简主义"],
    "color_tone": ["温暖明亮", "深沉内敛", "清新淡雅", "浓烈鲜明", "柔和细腻"],
    "creative_trait": ["天马行空", "细致入微", "大胆创新", "精益求精", "灵感丰富"],

    "philosophy": ["老庄哲学", "禅宗思想", "西方哲学", "人文主义", "存在主义"],
    "wisdom_trait": ["超然", "通透", "深邃", "敏锐", "包容", "理性"],
    "thinking_way": ["直觉感知", "逻辑分析", "整体思维", "细节观察", "创新思考"],

    "energy_pattern": ["螺旋上升", "波浪起伏", "稳定流动", "脉冲跳跃", "循环往复"],
    "energy_trait": ["温和治愈", "强劲有力", "灵动变化", "深沉稳定", "清新活跃"],
    "power_source": ["内在光芒", "自然能量", "智慧之光", "爱的力量", "创造之火"],

    "element": ["木", "火", "土", "金", "水"],
    "element_trait": ["生机勃勃", "热情洋溢", "稳重踏实", "锐利精准", "智慧深邃"],
    "element_environment": ["自然环境", "社交场合", "稳定环境", "竞争环境", "学习环境"],
    "element_power": ["成长治愈", "感染激励", "承载包容", "决断执行", "洞察应变"],
}

FALLBACK_VARIABLE = "默认"

VITAMINS = [
    "多巴胺森林漫步", "血清素音乐疗愈", "内啡肽运动释放", "催产素温暖拥抱",
    "褪黑素深度冥想", "肾上腺素冒险体验", "去甲肾上腺素专注力提升", "乙酰胆碱学习增强",
]

LUCKY_COLORS = [
    "鼠尾草绿 (Sage Green)", "暖杏仁米 (Warm Almond)", "薄雾蓝 (Misty Blue)",
    "桃花粉 (Peach Blossom)", "象牙白 (Ivory White)", "深海蓝 (Deep Ocean)",
    "日落橙 (Sunset Orange)", "薰衣草紫 (Lavender Purple)",
]

BALANCE_ELEMENTS = ["木", "火", "土", "金", "水"]
BALANCE_STATES = ["充盈", "平衡", "待补", "过旺", "不足"]

MONEY_ADVICE_OPTIONS = [
    {
        "title": "今日财运指南",
        "advice": "妳的财运呈现稳健上升的趋势，适合进行长期价值投资。今日的直觉力较强，可以信任内心的判断来做重要的财务决策。",
        "luckyDirection": "东南方",
        "luckyTime": "14:00-16:00",
        "suggestion": "理财建议：定投基金或储蓄计划",
    },
    {
        "title": "财富能量提升",
        "advice": "当前妳的财星运势旺盛，适合进行商务谈判或签署重要合同。妳的洞察力能够帮助识别潜在的投资机会。",
        "luckyDirection": "正南方",
        "luckyTime": "10:00-12:00",
        "suggestion": "投资建议：关注科技或新能源板块",
    },
    {
        "title": "财务规划优化",
        "advice": "妳在财务管理方面展现出谨慎理性的特质，适合制定长期的财富积累计划。避免冲动消费，专注于稳定收益。",
        "luckyDirection": "正北方",
        "luckyTime": "16:00-18:00",
        "suggestion": "规划建议：建立应急基金和退休储蓄",
    },
]

HEALTH_MORNING_ITEMS = [
    {"action": "饮一杯温润的茉莉花茶", "benefit": "疏肝理气，唤醒一天的通透感"},
    {"action": "十分钟舒展拉伸", "benefit": "唤醒肩颈与脊柱，让气血在清晨流动起来"},
    {"action": "窗边晒五分钟晨光", "benefit": "帮助身体校准作息节律，精神更加清爽"},
    {"action": "一碗温热的小米粥", "benefit": "温养脾胃，为上午的专注储备能量"},
    {"action": "晨间三分钟腹式呼吸", "benefit": "放慢心率，让思绪从睡意中平稳过渡"},
]

HEALTH_FLOW_ITEMS = [
    {"action": "冥想与自然白噪音", "benefit": "适合在14:00 - 16:00进行一次深呼吸"},
    {"action": "午后散步二十分钟", "benefit": "适合在15:00 - 16:00离开屏幕，让大脑重新聚焦"},
    {"action": "手写三行感恩日记", "benefit": "适合在21:00 - 22:00整理一天的情绪"},
    {"action": "一段无打扰的深度阅读", "benefit": "适合在19:00 - 20:00进入心流状态"},
    {"action": "睡前温水泡脚", "benefit": "适合在22:00 - 22:30放松神经，帮助入眠"},
]

# 静态兜底内容 - used when the AI path is abandoned
DEFAULT_CONTENT = GeneratedContent(
    personality="妳的生命底色如同初春的雨后森林，带有清新的气质与生长的内在力量。妳擅长在变化中寻找平衡，内心深处有着敏锐的感知力。",
    career="妳具备沟通协调的核心能力，在团队协作中能够展现优势。未来可以考虑向专业深耕方向发展，重点培养持续学习的能力。",
    wealth=WealthAdvice(**MONEY_ADVICE_OPTIONS[0]),
    health=HealthAdvice(
        morning=HealthItem(**HEALTH_MORNING_ITEMS[0]),
        flow=HealthItem(**HEALTH_FLOW_ITEMS[0]),
    ),
    advice="今日适合放慢节奏，在午后安排一段独处时光，整理思绪后再做重要决定。",
    love="妳在感情中真诚而温柔，适合以坦诚沟通的方式经营关系。",
    vitamin=VITAMINS[0],
    lucky_color=LUCKY_COLORS[0],
    element_balance="木气充盈，火气待补",
    source="default",
)
