"""Default content catalogs.

Everything here is immutable and passed to components explicitly through
``Catalog``; tests build their own catalogs instead of patching these.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Tuple

from ..models import ArticleTemplate, TopicEntry

KEYWORD_DICTIONARY: Tuple[str, ...] = (
    "telegram", "tg", "电报", "纸飞机", "telegram下载", "telegram中文",
    "秘密聊天", "频道", "群组", "机器人", "bot", "贴纸", "sticker",
    "两步验证", "端到端加密", "云同步", "代理", "proxy", "mtproto",
    "语音通话", "视频通话", "premium", "会员", "文件传输",
    "安卓", "android", "ios", "iphone", "windows", "mac",
    "注册", "登录", "验证码", "安全", "隐私", "设置",
)

DEFAULT_OUTLINE: Tuple[str, ...] = ("引言", "主要内容", "详细步骤", "常见问题", "总结")

TOPIC_CATALOG: Tuple[TopicEntry, ...] = (
    TopicEntry("Telegram {year}最新版下载 - 全平台安装指南", ("telegram下载", "telegram安装", "telegram中文"), "high"),
    TopicEntry("Telegram秘密聊天功能详解 - 端到端加密教程", ("秘密聊天", "端到端加密", "telegram安全"), "high"),
    TopicEntry("Telegram群组创建与管理完整指南", ("telegram群组", "tg群", "群组管理"), "medium"),
    TopicEntry("Telegram频道运营技巧 - 涨粉方法大全", ("telegram频道", "频道运营", "telegram推广"), "medium"),
    TopicEntry("Telegram机器人Bot使用教程", ("telegram机器人", "telegram bot", "tg机器人"), "medium"),
    TopicEntry("Telegram代理设置教程 - 解决连接问题", ("telegram代理", "mtproto", "telegram翻墙"), "high"),
    TopicEntry("Telegram vs WhatsApp对比 - 哪个更安全", ("telegram对比", "telegram vs whatsapp", "即时通讯"), "medium"),
    TopicEntry("Telegram Premium会员功能详解", ("telegram premium", "telegram会员", "tg会员"), "low"),
    TopicEntry("中文纸飞机下载 - Telegram安卓APK下载", ("中文纸飞机下载", "纸飞机apk", "telegram安卓"), "high"),
    TopicEntry("Telegram电脑版下载安装 - Windows/Mac教程", ("telegram电脑版", "telegram windows", "telegram mac"), "high"),
)

VARIANT_POOLS: Mapping[str, Tuple[str, ...]] = MappingProxyType({
    "edition": ("中文版", "最新版", "官方版", "正式版"),
    "platform": ("安卓", "iOS", "Windows", "Mac", "电脑"),
    "theme": ("使用教程", "完整指南", "入门教程", "高级技巧", "详解"),
    "audience": ("新手必看", "详细步骤", "完全攻略", "最新教程"),
})

GENERIC_PLATFORM = "电脑"

PLATFORM_STEPS: Mapping[str, str] = MappingProxyType({
    "安卓": "1. 打开Google Play商店\n2. 搜索\"Telegram\"\n3. 点击安装\n4. 等待下载完成",
    "iOS": "1. 打开App Store\n2. 搜索\"Telegram\"\n3. 点击获取\n4. 完成安装",
    "Windows": "1. 访问官网下载页面\n2. 选择Windows版本\n3. 运行安装程序\n4. 完成安装",
    "Mac": "1. 从App Store下载\n2. 或官网下载DMG\n3. 拖到应用程序文件夹\n4. 打开使用",
    GENERIC_PLATFORM: "Windows和Mac都可以从官网下载对应版本安装使用。",
})

ARTICLE_TEMPLATES: Tuple[ArticleTemplate, ...] = (
    ArticleTemplate(
        keyword="telegram下载",
        title_pattern="Telegram{edition}下载 - {platform}安装教程{year}",
        body_pattern="""# Telegram{edition}下载指南

Telegram是全球领先的即时通讯应用，本文提供{year}年最新的下载和安装教程。

## 为什么选择Telegram

- **安全加密**：采用MTProto协议，保护通讯安全
- **云端同步**：消息永久保存在云端
- **大文件传输**：支持最大2GB文件
- **超大群组**：群组最多20万成员

## {platform}版下载方法

### 方法一：官方下载

1. 访问Telegram官方网站
2. 选择{platform}版本
3. 下载安装包
4. 按照提示完成安装

### 方法二：应用商店下载

{platform_steps}

## 注册和登录

1. 打开Telegram应用
2. 输入手机号码
3. 输入验证码
4. 设置用户名

## 常见问题

**Q: Telegram免费吗？**
A: 是的，Telegram完全免费使用。

**Q: 消息安全吗？**
A: Telegram采用加密技术保护消息安全，秘密聊天更是端到端加密。

## 总结

Telegram是一款功能强大、安全可靠的即时通讯应用，推荐下载使用。""",
        description_pattern="Telegram{edition}下载，{platform}安装教程{year}最新版。提供官方下载链接和详细安装步骤。",
        tags=("telegram下载", "telegram安装", "tg下载", "{platform}"),
    ),
    ArticleTemplate(
        keyword="秘密聊天",
        title_pattern="Telegram秘密聊天{theme} - {audience}",
        body_pattern="""# Telegram秘密聊天{theme}

Telegram的秘密聊天功能提供端到端加密，确保通讯安全。

## 什么是秘密聊天

- **端到端加密**：只有收发双方能读取消息
- **阅后即焚**：可设置消息自动销毁
- **禁止转发**：消息无法被转发
- **截图通知**：截图时对方会收到通知

## 如何开启秘密聊天

### 移动端操作步骤

1. 打开与好友的对话
2. 点击好友名称
3. 选择"开始秘密聊天"
4. 等待对方接受

### 桌面端操作

1. 右键联系人
2. 选择"Start Secret Chat"

## 自毁消息设置

1. 点击计时器图标
2. 选择销毁时间
3. 发送的消息会在设定时间后自动删除

## 注意事项

- 秘密聊天不支持云端同步
- 只能在创建的设备上查看
- 不支持群组秘密聊天""",
        description_pattern="Telegram秘密聊天{theme}教程，了解端到端加密、阅后即焚等隐私保护功能。",
        tags=("telegram秘密聊天", "端到端加密", "telegram隐私", "telegram安全"),
    ),
    ArticleTemplate(
        keyword="群组",
        title_pattern="Telegram群组{theme}教程 - {audience}",
        body_pattern="""# Telegram群组{theme}教程

Telegram群组功能强大，支持最多20万成员，是社区运营的理想工具。

## 群组类型

### 普通群组
- 最多200成员
- 基础功能

### 超级群组
- 最多20万成员
- 高级管理功能
- 消息历史永久保存

## 创建群组

1. 点击新建群组
2. 添加初始成员
3. 设置名称和头像
4. 完成创建

## 群组管理

- 发送消息权限
- 添加成员权限
- 管理员权限分配
- 慢速模式与机器人管理

## 运营技巧

- 制定群规
- 定期活跃气氛
- 使用机器人辅助管理""",
        description_pattern="Telegram群组{theme}完整教程，学习创建、管理和运营Telegram群组的技巧。",
        tags=("telegram群组", "tg群", "群组管理", "telegram社区"),
    ),
    ArticleTemplate(
        keyword="频道",
        title_pattern="Telegram频道{theme} - {audience}",
        body_pattern="""# Telegram频道{theme}

Telegram频道是内容发布和品牌推广的工具，无订阅人数上限。

## 频道特点

- 单向广播模式
- 无订阅人数限制
- 支持评论功能
- 详细统计数据

## 创建频道

1. 点击新建频道
2. 设置频道名称和描述
3. 选择公开或私密
4. 设置频道链接

## 频道运营

### 内容策略
- 确定内容方向
- 保持更新频率

### 推广方法
- 群组内分享
- 与其他频道互推

## 变现方式

- 广告合作
- 会员付费内容""",
        description_pattern="Telegram频道{theme}教程，学习创建和运营频道，打造成功的内容发布平台。",
        tags=("telegram频道", "telegram channel", "频道运营", "telegram推广"),
    ),
    ArticleTemplate(
        keyword="机器人",
        title_pattern="Telegram机器人{theme} - {audience}",
        body_pattern="""# Telegram机器人{theme}

Telegram机器人是自动化工具，可以完成各种任务。

## 什么是Telegram Bot

- 执行预设任务
- 回复消息
- 处理命令
- 与外部服务集成

## 使用机器人

1. 搜索机器人名称
2. 点击Start或/start
3. 按照提示操作

## 创建机器人

1. 联系@BotFather
2. 发送/newbot
3. 设置名称和用户名
4. 获取API Token

## 安全注意事项

- 只使用可信机器人
- 不提供敏感信息
- 检查权限请求""",
        description_pattern="Telegram机器人{theme}教程，推荐实用Bot，学习如何使用和创建机器人。",
        tags=("telegram机器人", "telegram bot", "tg机器人", "telegram自动化"),
    ),
    ArticleTemplate(
        keyword="中文纸飞机下载",
        title_pattern="中文纸飞机下载{year} - Telegram{platform}版安装",
        body_pattern="""# 中文纸飞机下载{year}

纸飞机（Telegram）是全球流行的即时通讯应用之一，本文提供中文版下载方法。

## 什么是纸飞机

纸飞机是Telegram在中国的俗称，因其图标像纸飞机而得名。

## {platform}版下载

{platform_steps}

## 设置中文界面

1. 打开设置
2. 选择Language
3. 找到简体中文
4. 应用语言包

## 常见问题

**Q: 纸飞机和Telegram是一个软件吗？**
A: 是的，纸飞机是Telegram的中文俗称。""",
        description_pattern="中文纸飞机下载{year}最新版，提供Telegram安卓/iOS/电脑版下载和安装教程。",
        tags=("中文纸飞机下载", "纸飞机", "telegram中文", "telegram下载"),
    ),
)


@dataclass(frozen=True)
class Catalog:
    """Bundle of the static catalogs one run works with."""

    keywords: Tuple[str, ...] = KEYWORD_DICTIONARY
    topics: Tuple[TopicEntry, ...] = TOPIC_CATALOG
    templates: Tuple[ArticleTemplate, ...] = ARTICLE_TEMPLATES
    variants: Mapping[str, Tuple[str, ...]] = field(default_factory=lambda: VARIANT_POOLS)
    platform_steps: Mapping[str, str] = field(default_factory=lambda: PLATFORM_STEPS)
    generic_platform: str = GENERIC_PLATFORM
    outline: Tuple[str, ...] = DEFAULT_OUTLINE


DEFAULT_CATALOG = Catalog()
