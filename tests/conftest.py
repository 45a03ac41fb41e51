from __future__ import annotations

import json
from pathlib import Path

import pytest
from loguru import logger

PROCESSLIST_TEXT = """*************************** 1. row ***************************
     Id: 1
   User: app
   Host: 10.0.0.5:51234
     db: shop
Command: Sleep
   Time: 5
  State:
   Info: NULL
*************************** 2. row ***************************
     Id: 2
   User: app
   Host: 10.0.0.6:40000
     db: shop
Command: Query
   Time: 3
  State: executing
   Info: SELECT SLEEP(3)
*************************** 3. row ***************************
     Id: 3
   User: root
   Host: localhost
     db: NULL
Command: Query
   Time: 0
  State: starting
   Info: SHOW FULL PROCESSLIST
"""

SCHEMA_TEXT = """-- MySQL dump 10.13  Distrib 8.0.36, for Linux (x86_64)
USE `shop`;
CREATE TABLE `orders` (
  `id` int(11) NOT NULL AUTO_INCREMENT,
  `customer_id` int(11) NOT NULL,
  `note` varchar(255) DEFAULT NULL,
  `geo` point NOT NULL,
  PRIMARY KEY (`id`),
  KEY `idx_customer` (`customer_id`),
  SPATIAL KEY `sp_geo` (`geo`),
  FULLTEXT KEY `ft_note` (`note`),
  CONSTRAINT `fk_customer` FOREIGN KEY (`customer_id`) REFERENCES `customers` (`id`)
) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4
/*!50100 PARTITION BY HASH (id) PARTITIONS 4 */;
/*!50001 CREATE ALGORITHM=UNDEFINED */
/*!50013 DEFINER=`root`@`localhost` SQL SECURITY DEFINER */
/*!50001 VIEW `v_orders` AS select 1 AS `one` */;
USE `audit`;
CREATE TABLE `log` (
  `id` bigint NOT NULL,
  `payload` json,
  KEY `h` (`id`) USING HASH
) ENGINE=MEMORY;
/*!50003 CREATE*/ /*!50020 DEFINER=`root`@`localhost`*/ /*!50003 PROCEDURE `p1`() BEGIN END */;;
/*!50003 CREATE*/ /*!50020 DEFINER=`root`@`localhost`*/ /*!50003 FUNCTION `f1`() RETURNS int RETURN 1 */;;
/*!50003 CREATE*/ /*!50017 DEFINER=`root`@`localhost`*/ /*!50003 TRIGGER `t1` BEFORE INSERT ON `log` FOR EACH ROW SET NEW.id = 1 */;;
"""

VARIABLES_TEXT = """Variable_name\tValue
version\t8.0.36
version_comment\tMySQL Community Server - GPL
port\t3306
datadir\t/var/lib/mysql/
table_open_cache\t4000
max_connections\t151
log_bin\tON
binlog_format\tROW
"""

STATUS1_TEXT = """Variable_name\tValue
Uptime\t86400
Questions\t864000
Open_tables\t2000
Max_used_connections\t30
Threads_connected\t12
Threads_running\t2
Ssl_cipher\t
Innodb_max_trx_id\t18446744073709551615
"""

STATUS2_TEXT = """Variable_name\tValue
Uptime\t86410
Questions\t864100
Open_tables\t2000
Max_used_connections\t30
Threads_connected\t12
Threads_running\t3
"""

BINLOGS_TEXT = """Log_name\tFile_size\tEncrypted
mysql-bin.000001\t1073741824\tNo
mysql-bin.000002\t536870912\tNo
"""

CONFIG_TEXT = """[mysqld]
# data
datadir = /var/lib/mysql
port=3306
"""


@pytest.fixture(autouse=True)
def _reset_loguru():
    logger.remove()
    yield
    logger.remove()


@pytest.fixture
def processlist_text() -> str:
    return PROCESSLIST_TEXT


@pytest.fixture
def schema_text() -> str:
    return SCHEMA_TEXT


@pytest.fixture
def capture_texts() -> dict:
    return {
        "variables.txt": VARIABLES_TEXT,
        "status1.txt": STATUS1_TEXT,
        "status2.txt": STATUS2_TEXT,
        "processlist.txt": PROCESSLIST_TEXT,
        "binlogs.txt": BINLOGS_TEXT,
        "schema.sql": SCHEMA_TEXT,
        "my.cnf": CONFIG_TEXT,
    }


@pytest.fixture
def capture_dir(tmp_path: Path, capture_texts: dict) -> Path:
    directory = tmp_path / "db01_mysql_20250901"
    directory.mkdir()
    for name, text in capture_texts.items():
        (directory / name).write_text(text, encoding="utf-8")
    (directory / "file_status.json").write_text(
        json.dumps({"hostname": "db01.example.com", "interval": 10}), encoding="utf-8"
    )
    return directory
